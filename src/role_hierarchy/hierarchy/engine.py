"""
role_hierarchy.hierarchy.engine

Role Hierarchy Engine.

Responsibilities:
- Direct children lookup (one indexed store round trip).
- Descendant closure from a seed set, walked level by level with an explicit
  visited set so cyclic or self-referential parent data still terminates.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from role_hierarchy.db.repositories.roles import RoleRepo
from role_hierarchy.db.store import StoreClient
from role_hierarchy.models import Role
from role_hierarchy.observability.logging import get_logger

log = get_logger(__name__)


class RoleHierarchy:
    """
    Read-only view of the role tree.

    Cost of a closure is one `query_children` per reachable node. Sibling
    lookups of one level run concurrently (bounded by `concurrency`); the
    visited set is only mutated between levels by the traversing coroutine.
    """

    def __init__(self, *, store: StoreClient, concurrency: int = 8) -> None:
        self._roles = RoleRepo(store)
        self._concurrency = max(1, concurrency)

    async def children(self, role_id: str) -> list[Role]:
        return await self._roles.children(role_id)

    async def descendant_roles(self, role_ids: Iterable[str]) -> list[Role]:
        seeds = {r for r in role_ids if r}
        if not seeds:
            return []

        limiter = asyncio.Semaphore(self._concurrency)

        async def _children(role_id: str) -> list[Role]:
            async with limiter:
                return await self._roles.children(role_id)

        visited: set[str] = set()
        found: dict[str, Role] = {}
        frontier = sorted(seeds)
        while frontier:
            visited.update(frontier)
            # gather propagates the first store failure; no partial closure escapes.
            levels = await asyncio.gather(*(_children(r) for r in frontier))
            next_frontier: list[str] = []
            for kids in levels:
                for child in kids:
                    found.setdefault(child.id, child)
                    if child.id not in visited and child.id not in next_frontier:
                        next_frontier.append(child.id)
            frontier = next_frontier

        # A seed reached again means a cycle through it or one seed below another.
        revisited = seeds & found.keys()
        if revisited:
            log.debug("hierarchy.seed_reached_from_below", role_ids=sorted(revisited))
        return [role for role_id, role in found.items() if role_id not in seeds]

    async def descendants(self, role_ids: Iterable[str]) -> set[str]:
        return {role.id for role in await self.descendant_roles(role_ids)}


# --- Module Notes -----------------------------------------------------------
# Seed ids are never part of a closure, even when a cycle leads back to them or
# one seed lies below another.
