"""Pydantic schemas for projects, board columns and tasks."""

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field

from taskwise.db.documents import Column, Task


class ProjectCreate(BaseModel):
    """Request to create a project. Omitting column_titles seeds the default board."""
    name: str = Field(..., min_length=1, max_length=255)
    workspace_id: UUID
    description: str | None = None
    img_key: str | None = None
    img_url: str | None = None
    column_titles: list[str] | None = None


class ProjectUpdate(BaseModel):
    """Request to update project details (partial)."""
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    img_key: str | None = None
    img_url: str | None = None


class ProjectRead(BaseModel):
    id: UUID
    name: str
    description: str | None
    img_key: str | None
    img_url: str | None
    workspace_id: UUID
    creator_user_id: UUID
    is_active: bool
    deactivated_at: datetime | None
    order: list[str] = Field(validation_alias=AliasChoices("column_order", "order"))
    columns: list[Column]
    tasks: list[Task]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# =============================================================================
# Board
# =============================================================================

class ColumnCreate(BaseModel):
    title: str


class ColumnUpdate(BaseModel):
    """Partial column update; only fields present in the payload are applied."""
    title: str | None = None
    task_ids: list[str] | None = None


class ColumnOrderUpdate(BaseModel):
    order: list[str]


class TaskMove(BaseModel):
    source_column_id: str
    destination_column_id: str


class TaskMoveResponse(BaseModel):
    project: ProjectRead


# =============================================================================
# Tasks
# =============================================================================

class AttachmentIn(BaseModel):
    # Vocabulary is checked by the task service so errors surface as 400
    doc_type: str
    doc_name: str = ""
    doc_key: str = ""
    doc_url: str = ""


class TaskCreate(BaseModel):
    column_id: str
    task_name: str | None = None
    content: str | None = None
    assignee_user_id: UUID | None = None
    due_date: datetime | None = None
    priority: str | None = None
    attachments: list[AttachmentIn] | None = None


class TaskUpdate(BaseModel):
    """
    Request to update a task (partial).

    Only fields present in the payload are applied, so an empty string or an
    explicit null is a real update. ``assignee_user_id: null`` unassigns.
    """
    task_name: str | None = None
    content: str | None = None
    assignee_user_id: UUID | None = None
    due_date: datetime | None = None
    priority: str | None = None
    attachments: list[AttachmentIn] | None = None


class CommentCreate(BaseModel):
    comment: str = Field(..., min_length=1, max_length=5000)


class TaskCreateResponse(BaseModel):
    task_id: str
    project: ProjectRead
