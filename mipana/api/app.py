"""
FastAPI application factory.

* Registers the informational and tool routes.
* Opens CORS to any origin (the tools are called from browser clients).
* Applies rate-limiting middleware.
* Disposes the database pool on shutdown.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from mipana.api.middleware import limiter
from mipana.api.routes import info, tools
from mipana.config import settings
from mipana.infrastructure.database import engine

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("%s %s starting", settings.server_name, settings.server_version)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.server_name,
        description=(
            "Ride-hailing tools for MI PANA: nearby drivers, trip distance "
            "and ETA, fares in Bs or USD at the official BCV rate, ride "
            "creation and completion, and driver statistics."
        ),
        version=settings.server_version,
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    # Routers
    app.include_router(info.router)
    app.include_router(tools.router, prefix="/api/v1")

    return app
