"""
role_hierarchy

Hierarchical role and user directory with subtree-scoped authorization.

Responsibilities:
- Expose package version metadata.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
