"""
role_hierarchy.services

Service layer package.

Responsibilities:
- Directory, listing, summary and registration operations gated by the
  hierarchy policy.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services raise `role_hierarchy.errors` exceptions; HTTP mapping lives in `api.errors`.
