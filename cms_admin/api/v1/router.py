from fastapi import APIRouter

from cms_admin.api.v1.endpoints.health import router as health_router
from cms_admin.api.v1.endpoints.selection_dialogs import router as selection_dialogs_router
from cms_admin.api.v1.endpoints.upload_dialogs import router as upload_dialogs_router
from cms_admin.api.v1.endpoints.media import router as media_router


router = APIRouter(prefix="/v1")
router.include_router(health_router, tags=["health"])
router.include_router(selection_dialogs_router, tags=["selection-dialogs"])
router.include_router(upload_dialogs_router, tags=["upload-dialogs"])
router.include_router(media_router, tags=["media"])
