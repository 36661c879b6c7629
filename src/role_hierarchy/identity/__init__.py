"""
role_hierarchy.identity

Identity Account Store package.

Responsibilities:
- Define the boundary to the external identity provider holding login accounts.
- Provide an in-memory store (dev/test) and an HTTP adapter (remote provider).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The directory is authoritative; the identity provider is only cleaned up after it.
