"""
FastAPI application entry point.
Mounts routes, the Prometheus exporter, and the domain error handler.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from donation_api.api.v1.router import api_router
from donation_api.config import get_settings
from donation_api.core.exceptions import AuthenticationError, DomainError
from donation_api.core.logging_config import setup_logging
from donation_api.db.session import engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await engine.dispose()


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """The only place domain errors become HTTP responses."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        description="Donation marketplace: donors list items, schedule a pickup and conclude the donation.",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(DomainError, domain_error_handler)

    app.mount("/metrics", make_asgi_app())
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
