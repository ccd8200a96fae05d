# toolroom/main.py
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from toolroom.api.functions import router as functions_router
from toolroom.api.router import api_router
from toolroom.core.config import get_settings
from toolroom.core.logging import configure_logging, get_logger

logger = get_logger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        debug=settings.DEBUG,
        description="CNC talaşlı imalat hesaplayıcıları, makine parkı, hesaplama geçmişi ve AI asistan.",
    )

    app.state.settings = settings

    # Session cookie carries the signed-in user
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SECRET_KEY,
        session_cookie=settings.SESSION_COOKIE,
        same_site="lax",
        https_only=settings.SESSION_HTTPS_ONLY,
    )

    app.include_router(api_router, prefix="/api")
    app.include_router(functions_router, prefix="/functions/v1")

    # Health-check for infra
    @app.get("/healthz", tags=["health"])
    async def healthz():
        return {
            "status": "ok",
            "env": settings.ENV,
            "version": settings.VERSION,
        }

    logger.info("app_created", env=settings.ENV)
    return app


app = create_app()
