"""
role_hierarchy.db.repositories

Repository package.

Responsibilities:
- Typed access to roles and users on top of the `StoreClient` protocol.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories only map items to models; authorization and validation belong in services.
