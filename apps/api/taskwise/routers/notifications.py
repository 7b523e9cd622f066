"""
Me Router - /me endpoints.

The current user's notifications plus the workspaces, projects and tasks
visible to them.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from taskwise.core.deps import get_current_user, get_db
from taskwise.db.models import User
from taskwise.schemas.notification import NotificationRead, UnreadCountResponse
from taskwise.schemas.workspace import ProjectSummary, TaskView, WorkspaceSummary
from taskwise.services import notification_service, workspace_service

router = APIRouter()


# =============================================================================
# Notifications
# =============================================================================


@router.get("/notifications", response_model=list[NotificationRead])
def list_unread_notifications(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Unread notifications, newest first."""
    return notification_service.list_unread(db, user.id)


@router.get("/notifications/count", response_model=UnreadCountResponse)
def get_unread_count(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get unread notification count (for polling)."""
    return UnreadCountResponse(count=notification_service.unread_count(db, user.id))


@router.patch("/notifications/{notification_id}/read", response_model=NotificationRead)
def mark_notification_read(
    notification_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return notification_service.mark_read(db, notification_id, user.id)


# =============================================================================
# Cross-workspace views
# =============================================================================


@router.get("/workspaces", response_model=list[WorkspaceSummary])
def list_my_workspaces(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return workspace_service.list_workspaces_for_user(db, user.id)


@router.get("/projects", response_model=list[ProjectSummary])
def list_my_projects(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return workspace_service.list_projects_for_user(db, user.id)


@router.get("/tasks", response_model=list[TaskView])
def list_my_tasks(
    project_name: str | None = Query(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Active tasks assigned to the current user."""
    return workspace_service.list_tasks_for_user(db, user.id, project_name=project_name)
