from fastapi import APIRouter, Depends, status

from app.features.contact_finder.dependencies.crawl import get_job_registry
from app.features.contact_finder.services.job_registry import JobRegistry
from app.platform.config import settings
from app.platform.response import api_response


router = APIRouter()

@router.get("/health", tags=["health"])
async def health_check(registry: JobRegistry = Depends(get_job_registry)):
    return api_response(
        data={"status": "ok", "service": settings.APP_NAME, "active_jobs": len(registry)},
        message="Service is healthy",
        status_code=status.HTTP_200_OK,
    )
