"""
tests.test_policy

Allow/deny decisions over the A -> B -> C tree for a caller holding {B}.
"""

from __future__ import annotations

import pytest

from role_hierarchy.auth.models import CallerContext
from role_hierarchy.db.repositories.roles import RoleRepo
from role_hierarchy.hierarchy.policy import PolicyEvaluator
from role_hierarchy.models import Role

CALLER_B = CallerContext(subject_id="b@example.com", role_ids=frozenset({"B"}))
ROOT = CallerContext(subject_id="root@system.app", role_ids=frozenset(), is_root_admin=True)
NO_ROLES = CallerContext(subject_id="nobody@example.com", role_ids=frozenset())


@pytest.mark.asyncio
async def test_manageable_and_accessible_sets(policy: PolicyEvaluator, tree) -> None:
    assert await policy.manageable_set(CALLER_B) == {"C"}
    assert await policy.accessible_set(CALLER_B) == {"B", "C"}
    assert await policy.manageable_set(NO_ROLES) == set()


@pytest.mark.asyncio
async def test_create_role_requires_direct_possession(policy: PolicyEvaluator, tree) -> None:
    assert await policy.can_create_role(CALLER_B, "B") is True
    # C is manageable but not held: creation under it is denied.
    assert await policy.can_create_role(CALLER_B, "C") is False
    assert await policy.can_create_role(CALLER_B, "A") is False
    assert await policy.can_create_role(CALLER_B, "ROOT") is False


@pytest.mark.asyncio
async def test_root_admin_bypasses_everything(policy: PolicyEvaluator, tree) -> None:
    assert await policy.can_create_role(ROOT, "ROOT") is True
    assert await policy.can_update_role(ROOT, current_parent_id="ROOT", new_parent_id="ROOT") is True
    assert await policy.can_delete_role(ROOT, "A") is True
    assert await policy.can_create_user(ROOT, ["A"]) is True
    assert await policy.can_update_user(ROOT, current_roles=[], new_roles=["A"]) is True
    assert await policy.can_delete_user(ROOT, []) is True


@pytest.mark.asyncio
async def test_update_role_needs_both_parents_manageable(policy: PolicyEvaluator, tree) -> None:
    assert await policy.can_update_role(CALLER_B, current_parent_id="C", new_parent_id="C") is True
    # B is held, not manageable.
    assert await policy.can_update_role(CALLER_B, current_parent_id="B", new_parent_id="C") is False
    assert await policy.can_update_role(CALLER_B, current_parent_id="C", new_parent_id="ROOT") is False


@pytest.mark.asyncio
async def test_delete_role(policy: PolicyEvaluator, tree) -> None:
    assert await policy.can_delete_role(CALLER_B, "C") is True
    assert await policy.can_delete_role(CALLER_B, "B") is False
    assert await policy.can_delete_role(CALLER_B, "A") is False


@pytest.mark.asyncio
async def test_user_mutations(policy: PolicyEvaluator, tree) -> None:
    assert await policy.can_create_user(CALLER_B, ["C"]) is True
    assert await policy.can_create_user(CALLER_B, ["B"]) is False
    assert await policy.can_create_user(CALLER_B, ["C", "A"]) is False

    assert await policy.can_update_user(CALLER_B, current_roles=["C"], new_roles=["C"]) is True
    assert await policy.can_update_user(CALLER_B, current_roles=["C"], new_roles=["B"]) is False
    assert await policy.can_update_user(CALLER_B, current_roles=["A"], new_roles=["C"]) is False
    assert await policy.can_update_user(CALLER_B, current_roles=[], new_roles=["C"]) is False

    assert await policy.can_delete_user(CALLER_B, ["C"]) is True
    assert await policy.can_delete_user(CALLER_B, ["B"]) is False
    assert await policy.can_delete_user(CALLER_B, []) is False


@pytest.mark.asyncio
async def test_caller_without_roles_is_denied(policy: PolicyEvaluator, tree) -> None:
    assert await policy.can_create_role(NO_ROLES, "A") is False
    assert await policy.can_delete_role(NO_ROLES, "C") is False
    assert await policy.can_create_user(NO_ROLES, ["C"]) is False


@pytest.mark.asyncio
async def test_decisions_follow_reparenting(policy: PolicyEvaluator, store, tree) -> None:
    assert await policy.can_delete_role(CALLER_B, "C") is True
    await RoleRepo(store).put(Role(id="C", role_type="Team", name="Gamma", parent_id="A"))
    assert await policy.can_delete_role(CALLER_B, "C") is False
