"""
Notification Service - handles in-app notifications.

Provides the unread inbox and the task-assignment trigger called from the
task service. Delivery is poll-only.
"""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from taskwise.db.documents import Task
from taskwise.db.models import Notification, Project, Workspace
from taskwise.services.errors import NotFoundError

logger = logging.getLogger(__name__)


# =============================================================================
# Notification CRUD
# =============================================================================


def create_notification(
    db: Session,
    user_id: UUID,
    message: str,
    task_id: str,
    project_id: UUID,
) -> Notification:
    """Create an unread notification."""
    notification = Notification(
        user_id=user_id,
        message=message,
        task_id=task_id,
        project_id=project_id,
        is_read=False,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def list_unread(db: Session, user_id: UUID) -> list[Notification]:
    """Unread notifications for a user, newest first."""
    return (
        db.query(Notification)
        .filter(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        )
        .order_by(Notification.created_at.desc())
        .all()
    )


def unread_count(db: Session, user_id: UUID) -> int:
    return (
        db.query(Notification)
        .filter(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        )
        .count()
    )


def mark_read(db: Session, notification_id: UUID, user_id: UUID) -> Notification:
    """Mark a notification as read. Only the recipient can do this."""
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    ).first()
    if not notification:
        raise NotFoundError("Notification not found")

    if not notification.is_read:
        notification.is_read = True
        db.commit()
        db.refresh(notification)
    return notification


# =============================================================================
# Notification Triggers (called from the task service)
# =============================================================================


def build_assignment_message(
    task_name: str | None,
    project_name: str,
    workspace_name: str | None = None,
) -> str:
    message = (
        f"The following task has been assigned to you <taskName>{task_name or ''}</taskName>"
        f" in the project <projectName>{project_name}</projectName>"
    )
    if workspace_name:
        message += f" of workspace <workspaceName>{workspace_name}</workspaceName>"
    return message


def notify_task_assigned(
    db: Session,
    task: Task,
    project: Project,
    workspace: Workspace | None = None,
) -> Notification | None:
    """
    Notify the assignee when a task is assigned to someone other than its creator.

    Runs after the task is already committed. Failures are logged and
    swallowed so the task mutation stands.
    """
    if not task.assignee:
        return None
    if task.created_by and task.assignee.id == task.created_by.id:
        return None

    try:
        return create_notification(
            db,
            user_id=UUID(task.assignee.id),
            message=build_assignment_message(
                task.task_name,
                project.name,
                workspace.name if workspace else None,
            ),
            task_id=task.id,
            project_id=project.id,
        )
    except Exception:
        db.rollback()
        logger.exception(
            "Failed to record assignment notification for task %s in project %s",
            task.id,
            project.id,
        )
        return None
