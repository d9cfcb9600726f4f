from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api_routers.v1 import api_router
from app.features.contact_finder.routes.check import router as contact_finder_router
from app.features.contact_finder.services.job_registry import JobRegistry
from app.features.health.routes.health import router as health_router
from app.platform.config import settings
from app.platform.exceptions import add_exception_handlers


def create_app() -> FastAPI:
    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Streams contact emails discovered on a batch of websites",
        version="1.0.0",
        debug=settings.DEBUG,
    )

    # One registry per application; jobs never outlive the process.
    app.state.job_registry = JobRegistry()

    # Root endpoint for basic info
    @app.get("/", tags=["Info"])
    def root():
        return {
            "app_name": f"{settings.APP_NAME} API",
            "description": "Finds contact emails by probing sites and their contact/about pages.",
            "version": "1.0.0",
            "docs_url": "/docs",
            "api_base": "/api/v1",
        }

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_exception_handlers(app)

    # /check and /cancel at the root for existing clients, and under /api/v1.
    app.include_router(contact_finder_router)
    app.include_router(health_router)
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()
