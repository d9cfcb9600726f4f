from fastapi import APIRouter

from app.features.contact_finder.routes.check import router as contact_finder_router
from app.features.health.routes.health import router as health_router

api_router = APIRouter()


# Register all feature routes
api_router.include_router(contact_finder_router)
api_router.include_router(health_router)
