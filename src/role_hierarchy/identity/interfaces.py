"""
role_hierarchy.identity.interfaces

Identity Account Store contract.
"""

from __future__ import annotations

import enum
from typing import Protocol


class AccountDeletion(enum.StrEnum):
    deleted = "deleted"
    not_found = "not_found"
    failed = "failed"


class IdentityAccountStore(Protocol):
    async def delete_account(self, subject_id: str) -> AccountDeletion:
        """Remove a login account. Never raises for provider failures."""
        ...

    async def account_exists(self, subject_id: str) -> bool: ...

    async def create_account(self, subject_id: str, password: str) -> None: ...

    async def aclose(self) -> None: ...
