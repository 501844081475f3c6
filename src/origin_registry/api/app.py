"""
origin_registry.api.app

FastAPI app factory for the registry service.

Responsibilities:
- Build the FastAPI application and register routers, middleware and error handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory, HTTP client).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from origin_registry import __version__
from origin_registry.api.errors import register_exception_handlers
from origin_registry.api.routers.auth import router as auth_router
from origin_registry.api.routers.devices import router as devices_router
from origin_registry.api.routers.health import router as health_router
from origin_registry.api.routers.organizations import router as organizations_router
from origin_registry.api.routers.permissions import router as permissions_router
from origin_registry.api.routers.users import router as users_router
from origin_registry.db.session import create_engine, create_schema, create_sessionmaker
from origin_registry.observability.logging import configure_logging, get_logger
from origin_registry.observability.middleware import RequestContextMiddleware
from origin_registry.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        # Engine, session factory and the outbound HTTP client are shared per process.
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        app.state.http = httpx.AsyncClient()
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
            await create_schema(engine)
        try:
            yield
        finally:
            await app.state.http.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Origin Device Registry",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(organizations_router)
    app.include_router(devices_router)
    app.include_router(permissions_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; access decisions live in `auth.policy` and
# `permissions`, persistence in services.
