"""
role_hierarchy.observability

Observability package.

Responsibilities:
- structlog configuration (`logging`).
- Per-request id/caller context and completion events (`middleware`).
"""

# Package marker.
