"""Task service - business logic for tasks embedded in a project board."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from taskwise.db.documents import Attachment, Comment, Task
from taskwise.db.enums import DocType, TaskPriority
from taskwise.db.models import Project, User, Workspace
from taskwise.schemas.project import AttachmentIn, TaskCreate, TaskUpdate
from taskwise.services import board_service, notification_service, user_service, workspace_service
from taskwise.services.errors import InvalidArgumentError
from taskwise.services.project_service import get_project

logger = logging.getLogger(__name__)


# =============================================================================
# Validation
# =============================================================================


def validate_priority(priority: str | None) -> None:
    if priority is not None and not TaskPriority.has_value(priority):
        raise InvalidArgumentError("Invalid priority. Must be one of: Low, Medium, High")


def validate_attachments(attachments: list[AttachmentIn] | None) -> list[Attachment]:
    """Check the attachment vocabulary and required fields."""
    result = []
    for item in attachments or []:
        if not DocType.has_value(item.doc_type):
            raise InvalidArgumentError(
                "Invalid attachment type. Must be one of: image, document, video"
            )
        if not (item.doc_name and item.doc_key and item.doc_url):
            raise InvalidArgumentError("Attachments require doc_name, doc_key and doc_url")
        result.append(Attachment(**item.model_dump()))
    return result


def _resolve_assignee(db: Session, workspace: Workspace, user_id: UUID):
    """Snapshot an assignee who must be an active member of the workspace."""
    if not workspace_service.is_active_member(workspace, user_id):
        raise InvalidArgumentError("Assignee must be an active member of the workspace")
    user = user_service.get_user_by_id(db, user_id)
    if not user:
        raise InvalidArgumentError("Assignee must be an active member of the workspace")
    return user_service.to_snapshot(user)


# =============================================================================
# Lifecycle
# =============================================================================


def get_task(db: Session, project_id: UUID | str, task_id: str) -> Task:
    project = get_project(db, project_id)
    return board_service.find_task(project, task_id)


def create_task(
    db: Session,
    project_id: UUID | str,
    creator: User,
    data: TaskCreate,
) -> tuple[str, Project]:
    """
    Create a task and place it at the end of a column.

    The task and its column entry are written in one commit. The assignee,
    if any, is notified afterwards unless they created the task.
    """
    validate_priority(data.priority)
    attachments = validate_attachments(data.attachments)

    project = get_project(db, project_id)
    workspace = workspace_service.find_workspace_for_project(db, project)
    column = board_service.find_column(project, data.column_id)

    assignee = None
    if data.assignee_user_id is not None:
        assignee = _resolve_assignee(db, workspace, data.assignee_user_id)

    task = Task(
        task_name=data.task_name,
        content=data.content,
        assignee=assignee,
        due_date=data.due_date,
        priority=data.priority,
        attachments=attachments,
        created_by=user_service.to_snapshot(creator),
    )
    project.tasks.append(task)
    column.task_ids.append(task.id)
    column.updated_at = task.created_at

    project = board_service.save_board(db, project)
    logger.info("Created task %s in project %s", task.id, project.id)

    notification_service.notify_task_assigned(db, task, project, workspace)
    return task.id, project


def update_task(
    db: Session,
    project_id: UUID | str,
    task_id: str,
    data: TaskUpdate,
) -> Project:
    """
    Update task fields.

    Uses exclude_unset=True so only explicitly provided fields are updated.
    None and empty values ARE applied; ``assignee_user_id=None`` unassigns.
    """
    update_data = data.model_dump(exclude_unset=True)
    project = get_project(db, project_id)
    task = board_service.find_task(project, task_id)

    if "priority" in update_data:
        validate_priority(update_data["priority"])
    if "attachments" in update_data:
        update_data["attachments"] = validate_attachments(data.attachments)

    old_assignee_id = task.assignee.id if task.assignee else None
    workspace = None
    if "assignee_user_id" in update_data:
        assignee_user_id = update_data.pop("assignee_user_id")
        if assignee_user_id is None:
            update_data["assignee"] = None
        else:
            workspace = workspace_service.find_workspace_for_project(db, project)
            update_data["assignee"] = _resolve_assignee(db, workspace, assignee_user_id)

    for field in ("task_name", "content", "due_date", "priority", "attachments", "assignee"):
        if field in update_data:
            setattr(task, field, update_data[field])
    task.updated_at = datetime.now(timezone.utc)

    project = board_service.save_board(db, project)

    new_assignee_id = task.assignee.id if task.assignee else None
    if new_assignee_id and new_assignee_id != old_assignee_id:
        notification_service.notify_task_assigned(db, task, project, workspace)
    return project


def deactivate_task(db: Session, project_id: UUID | str, task_id: str) -> Project:
    """Soft-deactivate a task and take its id out of every column."""
    project = get_project(db, project_id)
    task = board_service.find_task(project, task_id)

    now = datetime.now(timezone.utc)
    task.is_active = False
    task.deactivated_at = now
    task.updated_at = now

    for column in project.columns:
        if task_id in column.task_ids:
            column.task_ids = [t for t in column.task_ids if t != task_id]
            column.updated_at = now

    return board_service.save_board(db, project)


def add_comment(
    db: Session,
    project_id: UUID | str,
    task_id: str,
    author: User,
    text: str,
) -> Project:
    """Append a comment with a snapshot of its author."""
    text = (text or "").strip()
    if not text:
        raise InvalidArgumentError("Comment is required")

    project = get_project(db, project_id)
    task = board_service.find_task(project, task_id)
    task.comments.append(Comment(user=user_service.to_snapshot(author), comment=text))
    task.updated_at = datetime.now(timezone.utc)
    return board_service.save_board(db, project)
