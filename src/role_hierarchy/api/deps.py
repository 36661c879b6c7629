"""
role_hierarchy.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Expose the shared infrastructure created in the app lifespan (store,
  hierarchy, identity store) from `app.state`.
- Assemble per-request service objects on top of it.
"""

from __future__ import annotations

from fastapi import Depends, Request

from role_hierarchy.db.store import StoreClient
from role_hierarchy.hierarchy.engine import RoleHierarchy
from role_hierarchy.hierarchy.policy import PolicyEvaluator
from role_hierarchy.identity.interfaces import IdentityAccountStore
from role_hierarchy.services.listing_service import ListingService
from role_hierarchy.services.registration import RegistrationService
from role_hierarchy.services.role_directory import RoleDirectory
from role_hierarchy.services.summary_service import SummaryService
from role_hierarchy.services.user_directory import UserDirectory
from role_hierarchy.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The app may be built with explicit settings (tests); never re-read env here.
    return request.app.state.settings  # type: ignore[attr-defined]


def store_dep(request: Request) -> StoreClient:
    return request.app.state.store  # type: ignore[attr-defined]


def hierarchy_dep(request: Request) -> RoleHierarchy:
    return request.app.state.hierarchy  # type: ignore[attr-defined]


def identity_dep(request: Request) -> IdentityAccountStore:
    return request.app.state.identity  # type: ignore[attr-defined]


def policy_dep(
    hierarchy: RoleHierarchy = Depends(hierarchy_dep),
    settings: Settings = Depends(settings_dep),
) -> PolicyEvaluator:
    return PolicyEvaluator(hierarchy=hierarchy, top_level_parent_id=settings.top_level_parent_id)


def role_directory_dep(
    store: StoreClient = Depends(store_dep),
    hierarchy: RoleHierarchy = Depends(hierarchy_dep),
    policy: PolicyEvaluator = Depends(policy_dep),
    settings: Settings = Depends(settings_dep),
) -> RoleDirectory:
    return RoleDirectory(store=store, hierarchy=hierarchy, policy=policy, settings=settings)


def user_directory_dep(
    store: StoreClient = Depends(store_dep),
    policy: PolicyEvaluator = Depends(policy_dep),
    identity: IdentityAccountStore = Depends(identity_dep),
    settings: Settings = Depends(settings_dep),
) -> UserDirectory:
    return UserDirectory(store=store, policy=policy, identity=identity, settings=settings)


def listing_service_dep(
    store: StoreClient = Depends(store_dep),
    policy: PolicyEvaluator = Depends(policy_dep),
    settings: Settings = Depends(settings_dep),
) -> ListingService:
    return ListingService(store=store, policy=policy, settings=settings)


def summary_service_dep(
    store: StoreClient = Depends(store_dep),
    policy: PolicyEvaluator = Depends(policy_dep),
    settings: Settings = Depends(settings_dep),
) -> SummaryService:
    return SummaryService(store=store, policy=policy, settings=settings)


def registration_service_dep(
    store: StoreClient = Depends(store_dep),
    identity: IdentityAccountStore = Depends(identity_dep),
    settings: Settings = Depends(settings_dep),
) -> RegistrationService:
    return RegistrationService(store=store, identity=identity, settings=settings)


# --- Module Notes -----------------------------------------------------------
# Services are cheap to build; only the objects on `app.state` live for the
# whole process.
