"""
Embedded documents stored inside workspace and project rows.

These are not separately addressable: a workspace owns its members, a project
owns its columns and tasks. Ids are generated here, before the owning row is
saved, so an element and every index that references it are written together.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class UserSnapshot(BaseModel):
    """Denormalized display copy of a user. Not re-synced on profile changes."""
    id: str
    username: str
    email: str


class Member(BaseModel):
    user_id: str
    role: str
    is_active: bool = True
    joined_at: datetime = Field(default_factory=_now)
    deactivated_at: datetime | None = None


class Attachment(BaseModel):
    doc_type: str
    doc_name: str
    doc_key: str
    doc_url: str


class Comment(BaseModel):
    id: str = Field(default_factory=new_id)
    user: UserSnapshot
    comment: str
    created_at: datetime = Field(default_factory=_now)


class Task(BaseModel):
    id: str = Field(default_factory=new_id)
    task_name: str | None = None
    content: str | None = None
    is_active: bool = True
    deactivated_at: datetime | None = None
    assignee: UserSnapshot | None = None
    due_date: datetime | None = None
    priority: str | None = None
    attachments: list[Attachment] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)
    created_by: UserSnapshot | None = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class Column(BaseModel):
    id: str = Field(default_factory=new_id)
    title: str
    is_active: bool = True
    deactivated_at: datetime | None = None
    # Ordered; a task id sits in at most one column at a time
    task_ids: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)
