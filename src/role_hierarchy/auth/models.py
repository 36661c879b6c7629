"""
role_hierarchy.auth.models

Auth domain models.

Responsibilities:
- Define the per-request caller identity (`CallerContext`) injected into endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CallerContext:
    """
    Authenticated caller identity. Produced per request, never persisted.
    """

    subject_id: str
    role_ids: frozenset[str]
    is_root_admin: bool = False


# --- Module Notes -----------------------------------------------------------
# `subject_id` is the caller's email, the same key the user directory uses.
