"""
role_hierarchy.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Liveness probe (`/healthz`).
- Readiness probe (`/readyz`) that round-trips the backing store.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from role_hierarchy.api.deps import store_dep
from role_hierarchy.db.store import StoreClient

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(store: StoreClient = Depends(store_dep)) -> dict[str, str]:
    # A StorageError here renders as a 500, which fails the probe.
    await store.ping()
    return {"status": "ready"}
