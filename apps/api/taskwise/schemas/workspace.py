"""Pydantic schemas for workspaces and membership."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from taskwise.db.documents import Attachment, Comment, Member, UserSnapshot
from taskwise.db.enums import MemberRole


class WorkspaceCreate(BaseModel):
    """Request to create a workspace. The caller becomes its first Admin."""
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    img_key: str | None = None
    img_url: str | None = None
    member_emails: list[str] = Field(default_factory=list)


class WorkspaceUpdate(BaseModel):
    """Request to update a workspace (partial)."""
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    img_key: str | None = None
    img_url: str | None = None


class WorkspaceRead(BaseModel):
    id: UUID
    name: str
    description: str | None
    img_key: str | None
    img_url: str | None
    creator_user_id: UUID
    is_active: bool
    deactivated_at: datetime | None
    project_ids: list[str]
    members: list[Member]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EmailStatus(BaseModel):
    email: str
    status: str


class WorkspaceCreateResponse(BaseModel):
    workspace: WorkspaceRead
    member_status: list[EmailStatus]
    message: str = "Workspace created successfully"


class MembersAdd(BaseModel):
    member_emails: list[str] = Field(..., min_length=1)
    role: MemberRole | None = None


class MembersRemove(BaseModel):
    member_emails: list[str] = Field(..., min_length=1)


class MembersResponse(BaseModel):
    workspace: WorkspaceRead
    members_status: list[EmailStatus]


class MemberRoleUpdate(BaseModel):
    user_id: UUID
    # Validated in the service so bad values map to a 400
    role: str


class MemberProfile(BaseModel):
    id: str
    email: str | None
    username: str | None
    img_url: str | None


class ActiveMemberRead(BaseModel):
    user: MemberProfile
    role: str
    is_active: bool
    joined_at: datetime
    deactivated_at: datetime | None


class WorkspaceSummary(BaseModel):
    """Workspace entry in a user's workspace list."""
    id: UUID
    name: str
    img_url: str | None
    members: list[Member]


class ProjectSummary(BaseModel):
    id: UUID
    name: str
    img_url: str | None
    workspace_id: UUID
    workspace_name: str


class TaskView(BaseModel):
    """Flattened task with the project/workspace it belongs to."""
    id: str
    name: str | None
    content: str | None
    project_id: UUID
    project: str
    workspace: str
    is_task_active: bool
    is_project_active: bool
    is_workspace_active: bool
    assignee: UserSnapshot | None
    due_date: datetime | None
    priority: str | None
    attachments: list[Attachment]
    comments: list[Comment]
    created_by: UserSnapshot | None


class MediaImage(BaseModel):
    img_key: str
    img_url: str


class MediaDocument(BaseModel):
    doc_name: str
    doc_url: str


class WorkspaceMedia(BaseModel):
    img_urls: list[MediaImage]
    doc_urls: list[MediaDocument]


class MessageResponse(BaseModel):
    message: str
