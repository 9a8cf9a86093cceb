"""Main FastAPI application for the Productivity Archive.

This module creates and configures the FastAPI application with the archive
router, error handlers and startup hooks.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from productivity_archive import __version__
from productivity_archive.api import archive_router, register_exception_handlers
from productivity_archive.config import get_settings
from productivity_archive.utils.logging import get_logger, setup_logging

# Setup logging
setup_logging()
logger = get_logger(__name__)

# Get settings
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler."""
    # Startup
    logger.info("application_starting", app=settings.app_name, version=__version__)

    from productivity_archive.core.database import init_db

    init_db()
    logger.info("database_initialized")

    yield

    # Shutdown
    logger.info("application_stopping")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    application = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Archive, analyse and restore completed productivity items",
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
        openapi_url="/api/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=3600,  # 1 hour cache for preflight requests
    )

    application.include_router(archive_router, prefix=settings.api_v1_prefix)
    register_exception_handlers(application)

    @application.get("/health")
    async def health() -> Dict[str, Any]:
        """Liveness probe."""
        return {"status": "ok", "version": __version__}

    @application.exception_handler(404)
    async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle 404 errors."""
        return JSONResponse(
            status_code=404,
            content={
                "success": False,
                "error": "NOT_FOUND",
                "message": f"The requested URL {request.url.path} was not found",
            },
        )

    return application


app = create_app()


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


# Export app for uvicorn
if __name__ == "__main__":
    main()
