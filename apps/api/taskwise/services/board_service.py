"""
Board service - columns, column order and task placement of a project.

A project row is the unit of consistency: every mutation here edits the
loaded columns/order/tasks in memory and writes the whole board in one
commit. Invariants kept:
- every id in column_order names a column of the project
- every id in a column's task_ids names a task of the project
- a task id sits in at most one column
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from taskwise.core.config import settings
from taskwise.db.documents import Column, Task
from taskwise.db.models import Project
from taskwise.schemas.project import ColumnUpdate
from taskwise.services.errors import InvalidArgumentError, NotFoundError
from taskwise.services.project_service import get_project

logger = logging.getLogger(__name__)


# =============================================================================
# Lookups
# =============================================================================


def find_column(project: Project, column_id: str) -> Column:
    for column in project.columns:
        if column.id == column_id:
            return column
    raise NotFoundError("Column not found")


def find_task(project: Project, task_id: str) -> Task:
    for task in project.tasks:
        if task.id == task_id:
            return task
    raise NotFoundError("Task not found")


def save_board(db: Session, project: Project) -> Project:
    """Persist columns, order and tasks together."""
    flag_modified(project, "columns")
    flag_modified(project, "column_order")
    flag_modified(project, "tasks")
    db.commit()
    db.refresh(project)
    return project


# =============================================================================
# Columns
# =============================================================================


def add_column(db: Session, project_id: UUID | str, title: str) -> Project:
    """Append an empty column and its id to the display order."""
    project = get_project(db, project_id)
    title = (title or "").strip()
    if not title:
        raise InvalidArgumentError("Title is required")

    column = Column(title=title)
    project.columns.append(column)
    project.column_order.append(column.id)
    return save_board(db, project)


def _validate_task_ids(project: Project, column: Column, task_ids: list[str]) -> None:
    if len(set(task_ids)) != len(task_ids):
        raise InvalidArgumentError("Task ids must not repeat")

    known = {t.id for t in project.tasks}
    unknown = [t for t in task_ids if t not in known]
    if unknown:
        raise InvalidArgumentError(f"Unknown task ids: {', '.join(unknown)}")

    for other in project.columns:
        if other.id == column.id:
            continue
        clash = set(task_ids) & set(other.task_ids)
        if clash:
            raise InvalidArgumentError(
                f"Tasks already placed in column {other.id}: {', '.join(sorted(clash))}"
            )


def update_column(
    db: Session,
    project_id: UUID | str,
    column_id: str,
    data: ColumnUpdate,
) -> Project:
    """Rename a column and/or replace its task list. Absent fields are left alone."""
    project = get_project(db, project_id)
    column = find_column(project, column_id)
    update_data = data.model_dump(exclude_unset=True)

    if "title" in update_data:
        update_data["title"] = (update_data["title"] or "").strip()
        if not update_data["title"]:
            raise InvalidArgumentError("Title is required")
    if "task_ids" in update_data:
        update_data["task_ids"] = list(update_data["task_ids"] or [])
        _validate_task_ids(project, column, update_data["task_ids"])

    for field, value in update_data.items():
        setattr(column, field, value)

    column.updated_at = datetime.now(timezone.utc)
    return save_board(db, project)


def deactivate_column(db: Session, project_id: UUID | str, column_id: str) -> Project:
    """
    Soft-deactivate a column.

    The column stays in column_order and keeps its task ids; clients hide
    inactive columns.
    """
    project = get_project(db, project_id)
    column = find_column(project, column_id)

    now = datetime.now(timezone.utc)
    column.is_active = False
    column.deactivated_at = now
    column.updated_at = now
    return save_board(db, project)


def reorder_columns(db: Session, project_id: UUID | str, order: list[str]) -> Project:
    """Replace the column display order."""
    project = get_project(db, project_id)

    if settings.STRICT_COLUMN_ORDER:
        if len(set(order)) != len(order):
            raise InvalidArgumentError("Column order must not repeat ids")
        known = {c.id for c in project.columns}
        unknown = [c for c in order if c not in known]
        if unknown:
            raise InvalidArgumentError(f"Unknown column ids: {', '.join(unknown)}")

    project.column_order = list(order)
    return save_board(db, project)


# =============================================================================
# Task placement
# =============================================================================


def move_task(
    db: Session,
    project_id: UUID | str,
    task_id: str,
    source_column_id: str,
    destination_column_id: str,
) -> Project:
    """Take a task id out of one column and append it to another."""
    project = get_project(db, project_id)
    source = find_column(project, source_column_id)
    destination = find_column(project, destination_column_id)

    if task_id not in source.task_ids:
        raise NotFoundError("Task not found in source column")

    source.task_ids.remove(task_id)
    if task_id not in destination.task_ids:
        destination.task_ids.append(task_id)

    now = datetime.now(timezone.utc)
    source.updated_at = now
    destination.updated_at = now
    logger.debug("Moved task %s from %s to %s", task_id, source.id, destination.id)
    return save_board(db, project)
