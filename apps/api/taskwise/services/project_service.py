"""Project service - project lifecycle inside a workspace."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from taskwise.db.documents import Column
from taskwise.db.enums import DEFAULT_COLUMN_TITLES
from taskwise.db.models import Project, User
from taskwise.schemas.project import ProjectCreate, ProjectUpdate
from taskwise.services import workspace_service
from taskwise.services.errors import (
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
)

logger = logging.getLogger(__name__)


def get_project(db: Session, project_id: UUID | str) -> Project:
    project = db.get(Project, workspace_service.parse_id(project_id, "project"))
    if not project:
        raise NotFoundError("Project not found")
    return project


def create_project(db: Session, creator: User, data: ProjectCreate) -> Project:
    """
    Create a project with its initial board.

    Column ids are generated up front, so the columns, their display order
    and the workspace's project list are all written in one commit.
    """
    name = data.name.strip()
    if not name:
        raise InvalidArgumentError("Name field is required")

    workspace = workspace_service.get_workspace(db, data.workspace_id)
    if not workspace.is_active:
        raise InvalidStateError("Workspace is not active")
    if not workspace_service.is_active_member(workspace, creator.id):
        raise PermissionDeniedError("You are not a member of this workspace")

    titles = data.column_titles if data.column_titles is not None else DEFAULT_COLUMN_TITLES
    columns = []
    for title in titles:
        title = (title or "").strip()
        if not title:
            raise InvalidArgumentError("Column title is required")
        columns.append(Column(title=title))

    project = Project(
        name=name,
        description=data.description,
        img_key=data.img_key,
        img_url=data.img_url,
        workspace_id=workspace.id,
        creator_user_id=creator.id,
        is_active=True,
        columns=columns,
        column_order=[c.id for c in columns],
        tasks=[],
    )
    db.add(project)
    db.flush()

    workspace_service.attach_project(workspace, project.id)
    db.commit()
    db.refresh(project)
    logger.info("Created project %s in workspace %s", project.id, workspace.id)
    return project


def _require_member(db: Session, project: Project, user_id: UUID | str) -> None:
    workspace = workspace_service.find_workspace_for_project(db, project)
    if not workspace_service.is_active_member(workspace, user_id):
        raise PermissionDeniedError("You are not a member of this workspace")


def update_project(
    db: Session,
    project_id: UUID | str,
    requesting_user_id: UUID | str,
    data: ProjectUpdate,
) -> Project:
    """Update project details. Only fields present in the payload are applied."""
    project = get_project(db, project_id)
    _require_member(db, project, requesting_user_id)

    update_data = data.model_dump(exclude_unset=True)
    if "name" in update_data:
        name = (update_data["name"] or "").strip()
        if not name:
            raise InvalidArgumentError("Name field is required")
        update_data["name"] = name

    for field, value in update_data.items():
        setattr(project, field, value)

    db.commit()
    db.refresh(project)
    return project


def deactivate_project(
    db: Session,
    project_id: UUID | str,
    requesting_user_id: UUID | str,
) -> Project:
    """Soft-deactivate a project. Its board is kept as is."""
    project = get_project(db, project_id)
    _require_member(db, project, requesting_user_id)

    project.is_active = False
    project.deactivated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(project)
    logger.info("Project %s deactivated", project.id)
    return project
