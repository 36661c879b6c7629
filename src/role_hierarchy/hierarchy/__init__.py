"""
role_hierarchy.hierarchy

Hierarchical authorization engine.

Responsibilities:
- Closure computation over the flat parent-pointer role records (`engine`).
- Per-mutation allow/deny rules built on that closure (`policy`).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package writes to the store.
