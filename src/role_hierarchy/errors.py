"""
role_hierarchy.errors

Domain error taxonomy.

Responsibilities:
- Define one exception type per error kind surfaced to callers.
- Carry a stable `kind` string that the API layer renders as `{message, kind}`.
"""

from __future__ import annotations

import enum


class ErrorKind(enum.StrEnum):
    # Values are part of the public error contract; treat as stable.
    validation = "Validation"
    authentication = "Authentication"
    authorization = "Authorization"
    not_found = "NotFound"
    conflict = "Conflict"
    protected_entity = "ProtectedEntity"
    storage = "Storage"
    identity_store_degraded = "IdentityStoreDegraded"


class DirectoryError(Exception):
    kind: ErrorKind = ErrorKind.storage

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DirectoryError):
    kind = ErrorKind.validation


class AuthenticationError(DirectoryError):
    kind = ErrorKind.authentication


class AuthorizationError(DirectoryError):
    kind = ErrorKind.authorization


class NotFoundError(DirectoryError):
    kind = ErrorKind.not_found


class ConflictError(DirectoryError):
    kind = ErrorKind.conflict

    def __init__(self, message: str, *, child_role_ids: list[str]) -> None:
        super().__init__(message)
        self.child_role_ids = child_role_ids


class ProtectedEntityError(DirectoryError):
    kind = ErrorKind.protected_entity


class StorageError(DirectoryError):
    """
    Backing-store failure. Never translated into "no results": a partial
    hierarchy traversal must not feed an authorization decision.
    """

    kind = ErrorKind.storage


# --- Module Notes -----------------------------------------------------------
# `IdentityStoreDegraded` has no exception class: it is reported as a status on
# a committed user deletion (see `services.user_directory.UserDeletionResult`).
