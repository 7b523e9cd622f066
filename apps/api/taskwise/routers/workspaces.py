"""Workspaces router - workspace lifecycle, members and workspace-wide views."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from taskwise.core.deps import get_current_user, get_db
from taskwise.db.models import User
from taskwise.schemas.project import ProjectRead
from taskwise.schemas.workspace import (
    ActiveMemberRead,
    MemberRoleUpdate,
    MembersAdd,
    MembersRemove,
    MembersResponse,
    TaskView,
    WorkspaceCreate,
    WorkspaceCreateResponse,
    WorkspaceMedia,
    WorkspaceRead,
    WorkspaceUpdate,
)
from taskwise.services import membership_service, workspace_service

router = APIRouter()


# =============================================================================
# Workspace CRUD
# =============================================================================


@router.post("", response_model=WorkspaceCreateResponse, status_code=201)
def create_workspace(
    body: WorkspaceCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a workspace. Member emails that do not resolve are reported, not rejected."""
    workspace, statuses = workspace_service.create_workspace(db, user, body)
    return WorkspaceCreateResponse(
        workspace=WorkspaceRead.model_validate(workspace),
        member_status=statuses,
    )


@router.get("", response_model=list[WorkspaceRead])
def list_workspaces(
    is_active: bool = Query(True),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return workspace_service.list_workspaces(db, is_active=is_active)


@router.get("/{workspace_id}", response_model=WorkspaceRead)
def get_workspace(
    workspace_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return workspace_service.get_workspace(db, workspace_id)


@router.patch("/{workspace_id}", response_model=WorkspaceRead)
def update_workspace(
    workspace_id: UUID,
    body: WorkspaceUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update workspace details (active Admin only)."""
    return workspace_service.update_workspace(db, workspace_id, user.id, body)


@router.post("/{workspace_id}/deactivate", response_model=WorkspaceRead)
def deactivate_workspace(
    workspace_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return workspace_service.deactivate_workspace(db, workspace_id, user.id)


# =============================================================================
# Members
# =============================================================================


@router.get("/{workspace_id}/members", response_model=list[ActiveMemberRead])
def list_active_members(
    workspace_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return workspace_service.list_active_members(db, workspace_id)


@router.post("/{workspace_id}/members", response_model=MembersResponse)
def add_members(
    workspace_id: UUID,
    body: MembersAdd,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add members by email. Per-email outcomes are returned in members_status."""
    workspace, statuses = membership_service.add_members(
        db, workspace_id, user.id, body.member_emails, body.role
    )
    return MembersResponse(
        workspace=WorkspaceRead.model_validate(workspace),
        members_status=statuses,
    )


@router.post("/{workspace_id}/members/remove", response_model=MembersResponse)
def remove_members(
    workspace_id: UUID,
    body: MembersRemove,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    workspace, statuses = membership_service.remove_members(
        db, workspace_id, user.id, body.member_emails
    )
    return MembersResponse(
        workspace=WorkspaceRead.model_validate(workspace),
        members_status=statuses,
    )


@router.patch("/{workspace_id}/members/role", response_model=WorkspaceRead)
def update_member_role(
    workspace_id: UUID,
    body: MemberRoleUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return membership_service.update_member_role(
        db, workspace_id, user.id, body.user_id, body.role
    )


@router.post("/{workspace_id}/exit", response_model=WorkspaceRead)
def exit_workspace(
    workspace_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Leave the workspace. The last active member leaving retires it."""
    return membership_service.exit_member(db, workspace_id, user.id)


# =============================================================================
# Workspace-wide views
# =============================================================================


@router.get("/{workspace_id}/projects", response_model=list[ProjectRead])
def list_workspace_projects(
    workspace_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return workspace_service.list_workspace_projects(db, workspace_id)


@router.get("/{workspace_id}/tasks", response_model=list[TaskView])
def list_workspace_tasks(
    workspace_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return workspace_service.list_workspace_tasks(db, workspace_id)


@router.get("/{workspace_id}/media", response_model=WorkspaceMedia)
def get_workspace_media(
    workspace_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return workspace_service.get_workspace_media(db, workspace_id)
