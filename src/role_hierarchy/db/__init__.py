"""
role_hierarchy.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, the Store Client and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services depend on the `StoreClient` protocol, not on SQLAlchemy; swapping the
# backing store means providing another implementation of `db.store.StoreClient`.
