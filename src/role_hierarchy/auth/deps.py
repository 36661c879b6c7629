"""
role_hierarchy.auth.deps

FastAPI dependency functions for authentication.

Responsibilities:
- Resolve the per-request `CallerContext` through the resolver chosen at startup.
- Bind the caller identity into the structured logging context.
"""

from __future__ import annotations

import structlog
from fastapi import Request

from role_hierarchy.auth.models import CallerContext
from role_hierarchy.auth.resolvers import CallerContextResolver


async def get_caller(request: Request) -> CallerContext:
    # Resolver built once in `api.app.create_app`. Async so the contextvar binding
    # happens on the request task rather than in a threadpool copy.
    resolver: CallerContextResolver = request.app.state.caller_resolver
    caller = resolver.resolve(request)
    structlog.contextvars.bind_contextvars(caller=caller.subject_id)
    return caller


# --- Module Notes -----------------------------------------------------------
# `AuthenticationError` raised here is rendered as 401 by `api.errors`.
