"""
role_hierarchy.identity.memory

Process-local identity account store for dev/test.

Passwords are kept as scrypt hashes (`scrypt$n$r$p$salt$key`), never in clear.
"""

from __future__ import annotations

import asyncio
import base64
import hashlib
import secrets
from hmac import compare_digest

from role_hierarchy.identity.interfaces import AccountDeletion

_SALT_BYTES = 16
_KEY_LEN = 32
_SCRYPT_N = 2**14
_SCRYPT_R = 8
_SCRYPT_P = 1


def _b64(value: bytes) -> str:
    return base64.urlsafe_b64encode(value).decode("ascii").rstrip("=")


def _unb64(value: str) -> bytes:
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def hash_password(password: str) -> str:
    salt = secrets.token_bytes(_SALT_BYTES)
    key = hashlib.scrypt(
        password.encode("utf-8"), salt=salt, n=_SCRYPT_N, r=_SCRYPT_R, p=_SCRYPT_P, dklen=_KEY_LEN
    )
    return f"scrypt${_SCRYPT_N}${_SCRYPT_R}${_SCRYPT_P}${_b64(salt)}${_b64(key)}"


def verify_password(password: str, hashed: str) -> bool:
    try:
        _, n, r, p, salt, key = hashed.split("$", 5)
        expected = _unb64(key)
        candidate = hashlib.scrypt(
            password.encode("utf-8"),
            salt=_unb64(salt),
            n=int(n),
            r=int(r),
            p=int(p),
            dklen=len(expected),
        )
    except ValueError:
        return False
    return compare_digest(candidate, expected)


class InMemoryIdentityAccountStore:
    def __init__(self) -> None:
        self._accounts: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def delete_account(self, subject_id: str) -> AccountDeletion:
        async with self._lock:
            if self._accounts.pop(subject_id, None) is None:
                return AccountDeletion.not_found
            return AccountDeletion.deleted

    async def account_exists(self, subject_id: str) -> bool:
        async with self._lock:
            return subject_id in self._accounts

    async def create_account(self, subject_id: str, password: str) -> None:
        hashed = hash_password(password)
        async with self._lock:
            self._accounts[subject_id] = hashed

    async def check_password(self, subject_id: str, password: str) -> bool:
        async with self._lock:
            hashed = self._accounts.get(subject_id)
        return hashed is not None and verify_password(password, hashed)

    async def aclose(self) -> None:
        return None
