"""
role_hierarchy.api.app

FastAPI app factory for the role hierarchy service.

Responsibilities:
- Build the FastAPI application and register routers, middleware and
  exception handlers.
- Own the lifespan of shared infrastructure: DB engine, Store Client,
  hierarchy engine and identity account store.
- Pick the Caller Context Resolver once, at app creation.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from role_hierarchy.api.errors import register_error_handlers
from role_hierarchy.api.routers.dev_auth import router as dev_auth_router
from role_hierarchy.api.routers.health import router as health_router
from role_hierarchy.api.routers.registration import router as registration_router
from role_hierarchy.api.routers.roles import router as roles_router
from role_hierarchy.api.routers.summary import router as summary_router
from role_hierarchy.api.routers.users import router as users_router
from role_hierarchy.auth.resolvers import build_resolver
from role_hierarchy.db.init_db import init_db
from role_hierarchy.db.session import create_engine, create_sessionmaker
from role_hierarchy.db.store import SqlStoreClient
from role_hierarchy.hierarchy.engine import RoleHierarchy
from role_hierarchy.identity.http_client import HttpIdentityAccountStore
from role_hierarchy.identity.interfaces import IdentityAccountStore
from role_hierarchy.identity.memory import InMemoryIdentityAccountStore
from role_hierarchy.observability.logging import configure_logging, get_logger
from role_hierarchy.observability.middleware import RequestContextMiddleware
from role_hierarchy.settings import Settings

log = get_logger(__name__)


def build_identity_store(settings: Settings) -> IdentityAccountStore:
    if settings.identity_store == "http":
        http = httpx.AsyncClient(
            base_url=settings.identity_base_url,
            timeout=settings.identity_timeout_seconds,
        )
        return HttpIdentityAccountStore(settings=settings, http=http)
    return InMemoryIdentityAccountStore()


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level, env=settings.env)
    # Fails fast on a forbidden resolver/env combination, before serving anything.
    resolver = build_resolver(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, auth_mode=settings.auth_mode)
        engine = create_engine(settings)
        store = SqlStoreClient(create_sessionmaker(engine))
        identity = build_identity_store(settings)

        app.state.engine = engine
        app.state.store = store
        app.state.hierarchy = RoleHierarchy(
            store=store, concurrency=settings.traversal_concurrency
        )
        app.state.identity = identity
        if settings.env in ("dev", "test"):
            # Prod runs Alembic migrations and the seed command instead.
            await init_db(engine, store=store, settings=settings)
        try:
            yield
        finally:
            await identity.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Role Hierarchy Service",
        version="0.1.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.caller_resolver = resolver

    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(registration_router)
    app.include_router(roles_router)
    app.include_router(users_router)
    app.include_router(summary_router)
    return app


# --- Module Notes -----------------------------------------------------------
# Objects stored on `app.state` are shared by all requests; each of them is safe
# for concurrent use (the store opens one session per call).
