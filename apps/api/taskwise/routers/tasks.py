"""Tasks router - tasks embedded in a project board."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from taskwise.core.deps import get_current_user, get_db
from taskwise.db.documents import Task
from taskwise.db.models import User
from taskwise.schemas.project import (
    CommentCreate,
    ProjectRead,
    TaskCreate,
    TaskCreateResponse,
    TaskUpdate,
)
from taskwise.services import task_service

router = APIRouter()


@router.post("/{project_id}/tasks", response_model=TaskCreateResponse, status_code=201)
def create_task(
    project_id: UUID,
    body: TaskCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a task at the end of a column.

    The assignee must be an active member of the project's workspace.
    """
    task_id, project = task_service.create_task(db, project_id, user, body)
    return TaskCreateResponse(task_id=task_id, project=ProjectRead.model_validate(project))


@router.get("/{project_id}/tasks/{task_id}", response_model=Task)
def get_task(
    project_id: UUID,
    task_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return task_service.get_task(db, project_id, task_id)


@router.patch("/{project_id}/tasks/{task_id}", response_model=ProjectRead)
def update_task(
    project_id: UUID,
    task_id: str,
    body: TaskUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update a task. Only fields present in the body are changed."""
    return task_service.update_task(db, project_id, task_id, body)


@router.post("/{project_id}/tasks/{task_id}/deactivate", response_model=ProjectRead)
def deactivate_task(
    project_id: UUID,
    task_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return task_service.deactivate_task(db, project_id, task_id)


@router.post(
    "/{project_id}/tasks/{task_id}/comments",
    response_model=ProjectRead,
    status_code=201,
)
def add_comment(
    project_id: UUID,
    task_id: str,
    body: CommentCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return task_service.add_comment(db, project_id, task_id, user, body.comment)
