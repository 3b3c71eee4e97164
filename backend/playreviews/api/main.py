"""Factory de la aplicacion FastAPI para GPlay Reviews."""

from __future__ import annotations

from datetime import date

from fastapi import FastAPI

from playreviews.api.errors import register_error_handlers
from playreviews.api.routers.resources import router as resources_router
from playreviews.api.routers.tools import router as tools_router
from playreviews.config import settings
from playreviews.logging_utils import configure_logging, get_logger
from playreviews.services.container import ReviewServices, build_services


def create_app(services: ReviewServices | None = None) -> FastAPI:
    """Crea y configura la instancia de FastAPI.

    Sin `services` construye el store desde `settings` (carga + seed mock).
    """
    configure_logging(force=True)
    logger = get_logger(__name__)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Google Play Reviews: tools and resources over a local review snapshot",
    )

    app.state.settings = settings
    app.state.services = services if services is not None else build_services(settings)

    register_error_handlers(app)
    app.include_router(tools_router, prefix="/tools", tags=["tools"])
    app.include_router(resources_router, prefix="/resources", tags=["resources"])

    logger.info(
        "%s ready with %s reviews", settings.app_name, app.state.services.store.count()
    )

    @app.get("/health", include_in_schema=False, status_code=200)
    def health() -> dict[str, str]:  # pyright: ignore[reportUnusedFunction]
        return {"status": "ok", "date": date.today().isoformat()}

    return app
