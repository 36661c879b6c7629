"""
role_hierarchy.auth

Authentication package.

Responsibilities:
- JWT helpers and validation.
- Caller Context Resolvers and the FastAPI caller dependency.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Authorization (who may manage what) lives in `role_hierarchy.hierarchy.policy`.
