from fastapi import APIRouter, Request

from cms_admin.schemas.common import HealthOut

router = APIRouter()


@router.get("/health", response_model=HealthOut)
async def health(request: Request) -> HealthOut:
    return HealthOut(status="ok", backend=type(request.app.state.backend).__name__)
