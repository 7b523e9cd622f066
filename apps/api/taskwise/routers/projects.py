"""Projects router - project lifecycle and board (columns, order, task moves)."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from taskwise.core.deps import get_current_user, get_db
from taskwise.db.models import User
from taskwise.schemas.project import (
    ColumnCreate,
    ColumnOrderUpdate,
    ColumnUpdate,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
    TaskMove,
    TaskMoveResponse,
)
from taskwise.services import board_service, project_service

router = APIRouter()


@router.post("", response_model=ProjectRead, status_code=201)
def create_project(
    body: ProjectCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a project with the default board unless column titles are given."""
    return project_service.create_project(db, user, body)


@router.get("/{project_id}", response_model=ProjectRead)
def get_project(
    project_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return project_service.get_project(db, project_id)


@router.patch("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: UUID,
    body: ProjectUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return project_service.update_project(db, project_id, user.id, body)


@router.post("/{project_id}/deactivate", response_model=ProjectRead)
def deactivate_project(
    project_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return project_service.deactivate_project(db, project_id, user.id)


# =============================================================================
# Board
# =============================================================================


@router.post("/{project_id}/columns", response_model=ProjectRead, status_code=201)
def add_column(
    project_id: UUID,
    body: ColumnCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return board_service.add_column(db, project_id, body.title)


@router.patch("/{project_id}/columns/{column_id}", response_model=ProjectRead)
def update_column(
    project_id: UUID,
    column_id: str,
    body: ColumnUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Rename a column or replace its task list."""
    return board_service.update_column(db, project_id, column_id, body)


@router.post("/{project_id}/columns/{column_id}/deactivate", response_model=ProjectRead)
def deactivate_column(
    project_id: UUID,
    column_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return board_service.deactivate_column(db, project_id, column_id)


@router.put("/{project_id}/order", response_model=ProjectRead)
def reorder_columns(
    project_id: UUID,
    body: ColumnOrderUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return board_service.reorder_columns(db, project_id, body.order)


@router.post("/{project_id}/tasks/{task_id}/move", response_model=TaskMoveResponse)
def move_task(
    project_id: UUID,
    task_id: str,
    body: TaskMove,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = board_service.move_task(
        db, project_id, task_id, body.source_column_id, body.destination_column_id
    )
    return TaskMoveResponse(project=ProjectRead.model_validate(project))
