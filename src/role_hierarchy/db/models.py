"""
role_hierarchy.db.models

Relational schema for the role directory.

Responsibilities:
- Define ORM models for roles (flat parent-pointer records) and users.
- Index `roles.parent_id` so children lookups stay a single indexed query.
- Store a user's role set as link rows so "roles intersects set" filters are
  plain SQL on every dialect.
"""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from role_hierarchy.db.base import Base


class RoleRow(Base):
    __tablename__ = "roles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    role_type: Mapped[str] = mapped_column(String(128), nullable=False)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    # Either another role's id or the top-level sentinel. No FK:
    # the sentinel is not a row.
    parent_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)


class UserRow(Base):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(320), primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    is_root_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    role_links: Mapped[list[UserRoleLink]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="UserRoleLink.position",
    )


class UserRoleLink(Base):
    __tablename__ = "user_roles"

    email: Mapped[str] = mapped_column(
        String(320), ForeignKey("users.email", ondelete="CASCADE"), primary_key=True
    )
    # No FK to roles: deleting a role leaves dangling references in users.
    role_id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)
    position: Mapped[int] = mapped_column(nullable=False, default=0)

    user: Mapped[UserRow] = relationship(back_populates="role_links")


# --- Module Notes -----------------------------------------------------------
# `position` only keeps the role list in the order it was written; role sets are
# compared order-insensitively everywhere.
