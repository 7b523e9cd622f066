"""SQLAlchemy ORM models for users, workspaces, projects and notifications."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from taskwise.db.base import Base
from taskwise.db.documents import Column, Member, Task
from taskwise.db.types import DocumentList, StringList


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Identity
# =============================================================================

class User(Base):
    """
    Application user.

    Email is stored lower-cased and is the lookup key for membership invites.
    """
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(100), default="User", nullable=False)
    img_key: Mapped[str | None] = mapped_column(String(500), nullable=True)
    img_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=_utcnow, onupdate=_utcnow, nullable=False
    )


# =============================================================================
# Workspace aggregate
# =============================================================================

class Workspace(Base):
    """
    A group of users sharing projects.

    Members are embedded; the project list holds ids only. Never hard-deleted:
    when the last active member leaves, the name gets a timestamp suffix so
    the unique slot can be reused.
    """
    __tablename__ = "workspaces"
    __table_args__ = (
        Index("idx_workspaces_active", "is_active"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    img_key: Mapped[str | None] = mapped_column(String(500), nullable=True)
    img_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    creator_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    deactivated_at: Mapped[datetime | None] = mapped_column(nullable=True)
    project_ids: Mapped[list[str]] = mapped_column(StringList, default=list, nullable=False)
    members: Mapped[list[Member]] = mapped_column(
        DocumentList(Member), default=list, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=_utcnow, onupdate=_utcnow, nullable=False
    )


# =============================================================================
# Project (board) aggregate
# =============================================================================

class Project(Base):
    """
    A Kanban board: columns, tasks and the display order of columns.

    Every id in a column's task_ids names a task in tasks; every id in
    column_order names a column in columns.
    """
    __tablename__ = "projects"
    __table_args__ = (
        Index("idx_projects_workspace", "workspace_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    img_key: Mapped[str | None] = mapped_column(String(500), nullable=True)
    img_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    workspace_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workspaces.id"), nullable=False
    )
    creator_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    deactivated_at: Mapped[datetime | None] = mapped_column(nullable=True)
    # "order" is reserved in SQL
    column_order: Mapped[list[str]] = mapped_column(
        "column_order", StringList, default=list, nullable=False
    )
    columns: Mapped[list[Column]] = mapped_column(
        DocumentList(Column), default=list, nullable=False
    )
    tasks: Mapped[list[Task]] = mapped_column(
        DocumentList(Task), default=list, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=_utcnow, onupdate=_utcnow, nullable=False
    )


# =============================================================================
# Notifications
# =============================================================================

class Notification(Base):
    """In-app notification created when a task is assigned to someone else."""
    __tablename__ = "notifications"
    __table_args__ = (
        Index("idx_notif_user_unread", "user_id", "is_read", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    task_id: Mapped[str] = mapped_column(String(64), nullable=False)
    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)
