"""
tests.test_api

End-to-end HTTP flows through the FastAPI app (real SQLite, in-memory identity).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from role_hierarchy.api.app import create_app
from role_hierarchy.errors import StorageError
from role_hierarchy.identity.interfaces import AccountDeletion
from role_hierarchy.settings import Settings


class FailingIdentityStore:
    async def delete_account(self, subject_id: str) -> AccountDeletion:
        return AccountDeletion.failed

    async def account_exists(self, subject_id: str) -> bool:
        return False

    async def create_account(self, subject_id: str, password: str) -> None:
        return None

    async def aclose(self) -> None:
        return None


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _auth(client: httpx.AsyncClient, email: str) -> dict[str, str]:
    r = await client.post("/v1/dev/token", json={"email": email})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['accessToken']}"}


async def _build_tree(client: httpx.AsyncClient, root: dict[str, str]) -> dict[str, str]:
    """Creates A -> B -> C as root admin and returns their generated ids."""
    ids: dict[str, str] = {}
    parent = None
    for label in ("A", "B", "C"):
        r = await client.post(
            "/v1/roles",
            json={"roleType": "Unit", "name": label, "parentId": parent},
            headers=root,
        )
        assert r.status_code == 201, r.text
        ids[label] = r.json()["id"]
        parent = ids[label]
    return ids


@pytest.mark.asyncio
async def test_requests_without_token_are_rejected(client: httpx.AsyncClient) -> None:
    r = await client.get("/v1/roles")
    assert r.status_code == 401
    assert r.json()["kind"] == "Authentication"


@pytest.mark.asyncio
async def test_directory_flow(client: httpx.AsyncClient, settings: Settings) -> None:
    root = await _auth(client, settings.root_admin_email)
    ids = await _build_tree(client, root)

    r = await client.post(
        "/v1/users",
        json={"email": "b@example.com", "name": "Bea", "roles": [ids["B"]]},
        headers=root,
    )
    assert r.status_code == 201

    b = await _auth(client, "b@example.com")

    r = await client.post(
        "/v1/users",
        json={"email": "u@example.com", "name": "U", "roles": [ids["C"]]},
        headers=b,
    )
    assert r.status_code == 201
    assert r.json() == {
        "email": "u@example.com",
        "name": "U",
        "roles": [ids["C"]],
        "isRootAdmin": False,
    }

    r = await client.post(
        "/v1/users",
        json={"email": "v@example.com", "name": "V", "roles": [ids["B"]]},
        headers=b,
    )
    assert r.status_code == 403
    assert r.json()["kind"] == "Authorization"

    r = await client.get("/v1/roles/assignable", headers=b)
    assert [role["id"] for role in r.json()["roles"]] == [ids["C"]]

    r = await client.get("/v1/users", params={"limit": 10}, headers=b)
    assert r.status_code == 200
    assert [u["email"] for u in r.json()["users"]] == ["u@example.com"]
    assert r.json()["nextCursor"] is None

    r = await client.get("/v1/summary", headers=b)
    assert r.json() == {"roleCount": 1, "userCount": 2}

    r = await client.delete(f"/v1/roles/{ids['B']}", headers=root)
    assert r.status_code == 409
    assert r.json()["kind"] == "Conflict"
    assert r.json()["childRoleIds"] == [ids["C"]]

    r = await client.delete("/v1/users/u@example.com", headers=b)
    assert r.status_code == 200
    assert r.json() == {"status": "fully-deleted"}

    r = await client.get("/v1/users/u@example.com", headers=root)
    assert r.status_code == 404
    assert r.json()["kind"] == "NotFound"

    # Seeded root role + A, B, C; seeded root admin + Bea.
    r = await client.get("/v1/summary", headers=root)
    assert r.json() == {"roleCount": 4, "userCount": 2}


@pytest.mark.asyncio
async def test_role_update_and_get(client: httpx.AsyncClient, settings: Settings) -> None:
    root = await _auth(client, settings.root_admin_email)
    ids = await _build_tree(client, root)

    r = await client.put(
        f"/v1/roles/{ids['C']}",
        json={"name": "C2", "roleType": "Team", "parentId": ids["A"]},
        headers=root,
    )
    assert r.status_code == 200
    assert r.json()["parentId"] == ids["A"]

    r = await client.get(f"/v1/roles/{ids['C']}", headers=root)
    assert r.json()["name"] == "C2"

    r = await client.get("/v1/roles", headers=root)
    assert len(r.json()["roles"]) == 4


@pytest.mark.asyncio
async def test_protected_records(client: httpx.AsyncClient, settings: Settings) -> None:
    root = await _auth(client, settings.root_admin_email)

    r = await client.delete(f"/v1/roles/{settings.root_role_id}", headers=root)
    assert r.status_code == 403
    assert r.json()["kind"] == "ProtectedEntity"

    r = await client.delete(f"/v1/users/{settings.root_admin_email}", headers=root)
    assert r.status_code == 403

    r = await client.put(
        f"/v1/users/{settings.root_admin_email}",
        json={"name": "Chief", "roles": [settings.root_role_id]},
        headers=root,
    )
    assert r.status_code == 200
    assert r.json()["name"] == "Chief"
    assert r.json()["isRootAdmin"] is True


@pytest.mark.asyncio
async def test_user_reads_flag_the_root_admin(client: httpx.AsyncClient, settings: Settings) -> None:
    root = await _auth(client, settings.root_admin_email)
    await client.post(
        "/v1/users",
        json={"email": "v@example.com", "name": "V", "roles": [settings.root_role_id]},
        headers=root,
    )

    r = await client.get(f"/v1/users/{settings.root_admin_email}", headers=root)
    assert r.json()["isRootAdmin"] is True

    r = await client.get("/v1/users/v@example.com", headers=root)
    assert r.json()["isRootAdmin"] is False

    r = await client.get("/v1/users", headers=root)
    assert [u["isRootAdmin"] for u in r.json()["users"]] == [False]


@pytest.mark.asyncio
async def test_storage_failure_is_generic_500(app: FastAPI, client: httpx.AsyncClient) -> None:
    class UnreachableStore:
        async def ping(self) -> None:
            raise StorageError("Backing store failure during ping: sqlite is gone")

    app.state.store = UnreachableStore()

    r = await client.get("/readyz")

    assert r.status_code == 500
    assert r.json() == {"message": "Internal server error", "kind": "Storage"}


@pytest.mark.asyncio
async def test_request_shape_errors_are_validation(client: httpx.AsyncClient, settings: Settings) -> None:
    root = await _auth(client, settings.root_admin_email)

    r = await client.post(
        "/v1/users", json={"email": "x@example.com", "name": "X", "roles": "nope"}, headers=root
    )
    assert r.status_code == 400
    assert r.json()["kind"] == "Validation"

    r = await client.post("/v1/roles", json={"name": "No type"}, headers=root)
    assert r.status_code == 400
    assert r.json()["kind"] == "Validation"

    r = await client.get("/v1/users", params={"limit": "many"}, headers=root)
    assert r.status_code == 400

    r = await client.get("/v1/users", params={"limit": 0}, headers=root)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_identity_failure_is_multi_status(
    app: FastAPI, client: httpx.AsyncClient, settings: Settings
) -> None:
    root = await _auth(client, settings.root_admin_email)
    ids = await _build_tree(client, root)
    await client.post(
        "/v1/users",
        json={"email": "u@example.com", "name": "U", "roles": [ids["C"]]},
        headers=root,
    )
    app.state.identity = FailingIdentityStore()

    r = await client.delete("/v1/users/u@example.com", headers=root)

    assert r.status_code == 207
    assert r.json()["status"] == "partially-deleted"
    assert r.json()["kind"] == "IdentityStoreDegraded"
    r = await client.get("/v1/users/u@example.com", headers=root)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_registration(client: httpx.AsyncClient, settings: Settings) -> None:
    root = await _auth(client, settings.root_admin_email)
    await client.post(
        "/v1/users", json={"email": "new@example.com", "name": "New", "roles": [settings.root_role_id]},
        headers=root,
    )
    key = {"x-api-key": "test-registration-key"}
    body = {"email": "new@example.com", "password": "s3cret"}

    r = await client.post("/v1/auth/register", json=body, headers=key)
    assert r.status_code == 201
    assert r.json() == {"status": "registered"}

    r = await client.post("/v1/auth/register", json=body, headers=key)
    assert r.status_code == 200
    assert r.json() == {"status": "already-registered"}

    r = await client.post("/v1/auth/register", json=body, headers={"x-api-key": "wrong"})
    assert r.status_code == 401
