"""FastAPI application factory for the photo service."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import router
from .config import Settings, get_settings
from .errors import PhotoHubError

logger = logging.getLogger(__name__)


async def photohub_error_handler(request: Request, exc: PhotoHubError) -> JSONResponse:
    """Render domain errors as ``{message[, error]}`` JSON bodies."""
    logger.info(
        "Request failed",
        extra={"path": request.url.path, "error_type": type(exc).__name__, "status": exc.status_code},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    logging.basicConfig(level=logging.INFO)
    settings = Settings()
    app = FastAPI(
        title="PhotoHub",
        description="User registration and image upload service with in-place compression.",
        version="0.1.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(PhotoHubError, photohub_error_handler)
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured address."""
    import uvicorn

    settings = get_settings()
    logger.info("Starting server", extra={"host": settings.host, "port": settings.port})
    uvicorn.run("photohub.main:app", host=settings.host, port=settings.port)
