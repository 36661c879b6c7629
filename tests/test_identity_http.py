"""
tests.test_identity_http

HTTP identity adapter against a mocked provider.
"""

from __future__ import annotations

import json

import httpx
import pytest

from role_hierarchy.auth.jwt import decode_and_validate
from role_hierarchy.auth.resolvers import jwt_config
from role_hierarchy.errors import StorageError
from role_hierarchy.identity.http_client import HttpIdentityAccountStore
from role_hierarchy.identity.interfaces import AccountDeletion


def _store(settings, handler) -> HttpIdentityAccountStore:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://identity.test")
    return HttpIdentityAccountStore(settings=settings, http=http)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status_code", "expected"),
    [
        (204, AccountDeletion.deleted),
        (200, AccountDeletion.deleted),
        (404, AccountDeletion.not_found),
        (500, AccountDeletion.failed),
        (403, AccountDeletion.failed),
    ],
)
async def test_delete_maps_provider_status(settings, status_code: int, expected) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status_code)

    store = _store(settings, handler)
    try:
        assert await store.delete_account("u@example.com") is expected
    finally:
        await store.aclose()

    assert seen[0].method == "DELETE"
    assert seen[0].url.path.startswith("/v1/accounts/")


@pytest.mark.asyncio
async def test_delete_transport_error_is_failed(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    store = _store(settings, handler)
    try:
        assert await store.delete_account("u@example.com") is AccountDeletion.failed
    finally:
        await store.aclose()


@pytest.mark.asyncio
async def test_calls_carry_service_token(settings) -> None:
    tokens: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        tokens.append(request.headers["authorization"].removeprefix("Bearer "))
        return httpx.Response(404)

    store = _store(settings, handler)
    try:
        assert await store.account_exists("u@example.com") is False
    finally:
        await store.aclose()

    claims = decode_and_validate(cfg=jwt_config(settings), token=tokens[0])
    assert claims["sub"] == "role-hierarchy-service"


@pytest.mark.asyncio
async def test_create_and_exists(settings) -> None:
    created: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            created.append(json.loads(request.content))
            return httpx.Response(201)
        return httpx.Response(200, json={"subject": "u@example.com"})

    store = _store(settings, handler)
    try:
        await store.create_account("u@example.com", "pw")
        assert await store.account_exists("u@example.com") is True
    finally:
        await store.aclose()

    assert created == [{"subject": "u@example.com", "password": "pw"}]


@pytest.mark.asyncio
async def test_provider_outage_raises_storage_error(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    store = _store(settings, handler)
    try:
        with pytest.raises(StorageError):
            await store.account_exists("u@example.com")
        with pytest.raises(StorageError):
            await store.create_account("u@example.com", "pw")
    finally:
        await store.aclose()
