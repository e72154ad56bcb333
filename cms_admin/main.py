import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from cms_admin.api.v1.router import router as v1_router
from cms_admin.backends.base import CmsBackend
from cms_admin.backends.registry import build_backend
from cms_admin.core.config import Settings, settings as default_settings
from cms_admin.core.telemetry import setup_telemetry
from cms_admin.services.dialogs import DialogRegistry
from cms_admin.services.media_library import MediaLibrary
from cms_admin.services.query_cache import QueryCache


log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("console: backend=%s", type(app.state.backend).__name__)
    yield
    await app.state.backend.aclose()


def create_app(*, settings: Settings | None = None, backend: CmsBackend | None = None) -> FastAPI:
    settings = settings or default_settings
    backend = backend or build_backend(settings)
    cache = QueryCache()

    app = FastAPI(title="CMS Admin Console API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.backend = backend
    app.state.cache = cache
    app.state.dialogs = DialogRegistry(backend=backend, cache=cache, settings=settings)
    app.state.media_library = MediaLibrary(backend=backend, cache=cache)

    setup_telemetry(app, settings)
    app.include_router(v1_router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s: %(message)s")
    uvicorn.run("cms_admin.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
