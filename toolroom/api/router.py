# toolroom/api/router.py
from fastapi import APIRouter

from toolroom.core.config import get_settings
from toolroom.api import auth as auth_api
from toolroom.api import calculators as calculators_api
from toolroom.api import currency as currency_api
from toolroom.api import dashboard as dashboard_api
from toolroom.api import history as history_api
from toolroom.api import machines as machines_api
from toolroom.api import materials as materials_api
from toolroom.api import menu as menu_api
from toolroom.api import permissions as permissions_api
from toolroom.api import reference as reference_api

api_router = APIRouter()
settings = get_settings()

@api_router.get("/health", tags=["health"])
async def health_check():
    return {
        "status": "ok",
        "env": settings.ENV,
        "version": settings.VERSION,
        "service": settings.PROJECT_NAME,
    }

api_router.include_router(auth_api.router)
api_router.include_router(reference_api.router)
api_router.include_router(calculators_api.router)
api_router.include_router(materials_api.router)
api_router.include_router(machines_api.router)
api_router.include_router(history_api.router)
api_router.include_router(menu_api.router)
api_router.include_router(permissions_api.router)
api_router.include_router(currency_api.router)
api_router.include_router(dashboard_api.router)
