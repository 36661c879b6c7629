"""
role_hierarchy.api

HTTP surface of the role hierarchy service.

Responsibilities:
- FastAPI app factory, routers and exception handlers.
- Dependency wiring from `app.state` to the service layer.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers only translate HTTP to service calls; every allow/deny decision lives
# in `hierarchy.policy`.
