"""Workspace service - workspace lifecycle and cross-project views."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from taskwise.core.config import settings
from taskwise.db.documents import Member, Task
from taskwise.db.enums import DocType, InviteStatus, MemberRole
from taskwise.db.models import Project, User, Workspace
from taskwise.schemas.workspace import (
    ActiveMemberRead,
    EmailStatus,
    MediaDocument,
    MediaImage,
    MemberProfile,
    ProjectSummary,
    TaskView,
    WorkspaceCreate,
    WorkspaceMedia,
    WorkspaceSummary,
    WorkspaceUpdate,
)
from taskwise.services import user_service
from taskwise.services.errors import (
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
)

logger = logging.getLogger(__name__)


def parse_id(value: UUID | str, label: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise InvalidArgumentError(f"Invalid {label} ID")


# =============================================================================
# Member lookups
# =============================================================================


def find_member(workspace: Workspace, user_id: UUID | str) -> Member | None:
    """Return the member entry for a user, active or not."""
    key = str(user_id)
    for member in workspace.members:
        if member.user_id == key:
            return member
    return None


def is_active_member(workspace: Workspace, user_id: UUID | str) -> bool:
    member = find_member(workspace, user_id)
    return bool(member and member.is_active)


def is_active_admin(workspace: Workspace, user_id: UUID | str) -> bool:
    member = find_member(workspace, user_id)
    return bool(member and member.is_active and member.role == MemberRole.ADMIN.value)


def active_members(workspace: Workspace) -> list[Member]:
    return [m for m in workspace.members if m.is_active]


def require_active_admin(workspace: Workspace, user_id: UUID | str) -> None:
    if not is_active_admin(workspace, user_id):
        raise PermissionDeniedError("You are not authorized to perform this action")


# =============================================================================
# Workspace CRUD
# =============================================================================


def get_workspace(db: Session, workspace_id: UUID | str) -> Workspace:
    workspace = db.get(Workspace, parse_id(workspace_id, "workspace"))
    if not workspace:
        raise NotFoundError("Workspace not found")
    return workspace


def list_workspaces(db: Session, is_active: bool = True) -> list[Workspace]:
    return (
        db.query(Workspace)
        .filter(Workspace.is_active.is_(is_active))
        .order_by(Workspace.created_at)
        .all()
    )


def _ensure_name_available(db: Session, name: str, exclude_id: UUID | None = None) -> None:
    query = db.query(Workspace).filter(Workspace.name == name)
    if exclude_id is not None:
        query = query.filter(Workspace.id != exclude_id)
    if query.first():
        raise InvalidStateError("Workspace name is already in use")


def _commit_workspace(db: Session, workspace: Workspace) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise InvalidStateError("Workspace name is already in use")
    db.refresh(workspace)


def create_workspace(
    db: Session,
    creator: User,
    data: WorkspaceCreate,
) -> tuple[Workspace, list[EmailStatus]]:
    """
    Create a workspace with the creator as its sole Admin.

    Each email in member_emails is added as an active Member when it resolves
    to a user; unresolved emails are reported, not raised.
    """
    name = data.name.strip()
    if not name:
        raise InvalidArgumentError("Name field is required")
    _ensure_name_available(db, name)

    members = [Member(user_id=str(creator.id), role=MemberRole.ADMIN.value)]
    seen = {str(creator.id)}
    statuses: list[EmailStatus] = []

    for email in data.member_emails:
        user = user_service.get_user_by_email(db, email)
        if not user:
            statuses.append(EmailStatus(email=email, status=InviteStatus.NOT_FOUND.value))
            continue
        if str(user.id) in seen:
            statuses.append(EmailStatus(email=email, status=InviteStatus.DUPLICATE.value))
            continue
        seen.add(str(user.id))
        members.append(Member(user_id=str(user.id), role=MemberRole.MEMBER.value))
        statuses.append(EmailStatus(email=email, status=InviteStatus.ADDED.value))

    workspace = Workspace(
        name=name,
        description=data.description,
        img_key=data.img_key,
        img_url=data.img_url or settings.DEFAULT_WORKSPACE_IMG_URL,
        creator_user_id=creator.id,
        is_active=True,
        project_ids=[],
        members=members,
    )
    db.add(workspace)
    _commit_workspace(db, workspace)
    logger.info("Created workspace %s with %d members", workspace.id, len(members))
    return workspace, statuses


def update_workspace(
    db: Session,
    workspace_id: UUID | str,
    requesting_user_id: UUID | str,
    data: WorkspaceUpdate,
) -> Workspace:
    """Update workspace details. Only fields present in the payload are applied."""
    workspace = get_workspace(db, workspace_id)
    require_active_admin(workspace, requesting_user_id)

    update_data = data.model_dump(exclude_unset=True)
    if "name" in update_data:
        name = (update_data["name"] or "").strip()
        if not name:
            raise InvalidArgumentError("Name field is required")
        _ensure_name_available(db, name, exclude_id=workspace.id)
        update_data["name"] = name

    for field, value in update_data.items():
        setattr(workspace, field, value)

    _commit_workspace(db, workspace)
    return workspace


def deactivate_workspace(
    db: Session,
    workspace_id: UUID | str,
    requesting_user_id: UUID | str,
) -> Workspace:
    """Soft-deactivate a workspace (admin only). Members are left as they are."""
    workspace = get_workspace(db, workspace_id)
    require_active_admin(workspace, requesting_user_id)

    workspace.is_active = False
    workspace.deactivated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(workspace)
    logger.info("Workspace %s deactivated by admin", workspace.id)
    return workspace


def retire_workspace(workspace: Workspace) -> None:
    """
    Deactivate a workspace whose last active member left.

    The name gets an epoch-millisecond suffix to free the unique slot. The
    base name is cut so the result still fits the name column. Caller commits.
    """
    now = datetime.now(timezone.utc)
    suffix = f"_{int(now.timestamp() * 1000)}"
    max_length = Workspace.__table__.c.name.type.length
    workspace.name = workspace.name[: max_length - len(suffix)] + suffix
    workspace.is_active = False
    workspace.deactivated_at = now


def attach_project(workspace: Workspace, project_id: UUID | str) -> None:
    """Append a project id to the workspace's project list. Caller commits."""
    key = str(project_id)
    if key not in workspace.project_ids:
        workspace.project_ids.append(key)
        flag_modified(workspace, "project_ids")


def find_workspace_for_project(db: Session, project: Project) -> Workspace:
    """
    Resolve the workspace that owns a project.

    The project's workspace reference is only trusted when that workspace
    also lists the project.
    """
    workspace = db.get(Workspace, project.workspace_id)
    if not workspace or str(project.id) not in workspace.project_ids:
        raise NotFoundError("Workspace not found for the project")
    return workspace


# =============================================================================
# Derived views
# =============================================================================


def list_active_members(db: Session, workspace_id: UUID | str) -> list[ActiveMemberRead]:
    """Active members with their current email and image."""
    workspace = get_workspace(db, workspace_id)
    members = active_members(workspace)
    users = user_service.get_users_by_ids(db, [m.user_id for m in members])

    result = []
    for member in members:
        user = users.get(member.user_id)
        result.append(
            ActiveMemberRead(
                user=MemberProfile(
                    id=member.user_id,
                    email=user.email if user else None,
                    username=user.username if user else None,
                    img_url=user.img_url if user else None,
                ),
                role=member.role,
                is_active=member.is_active,
                joined_at=member.joined_at,
                deactivated_at=member.deactivated_at,
            )
        )
    return result


def _projects_of(db: Session, workspace: Workspace) -> list[Project]:
    """Projects listed by the workspace, in list order."""
    keys = []
    for raw in workspace.project_ids:
        try:
            keys.append(UUID(raw))
        except ValueError:
            continue
    if not keys:
        return []
    projects = {p.id: p for p in db.query(Project).filter(Project.id.in_(keys)).all()}
    return [projects[k] for k in keys if k in projects]


def list_workspace_projects(db: Session, workspace_id: UUID | str) -> list[Project]:
    workspace = get_workspace(db, workspace_id)
    return _projects_of(db, workspace)


def _task_view(task: Task, project: Project, workspace: Workspace) -> TaskView:
    return TaskView(
        id=task.id,
        name=task.task_name,
        content=task.content,
        project_id=project.id,
        project=project.name,
        workspace=workspace.name,
        is_task_active=task.is_active,
        is_project_active=project.is_active,
        is_workspace_active=workspace.is_active,
        assignee=task.assignee,
        due_date=task.due_date,
        priority=task.priority,
        attachments=task.attachments,
        comments=task.comments,
        created_by=task.created_by,
    )


def list_workspace_tasks(db: Session, workspace_id: UUID | str) -> list[TaskView]:
    """Active tasks across the active projects of an active workspace."""
    workspace = get_workspace(db, workspace_id)
    if not workspace.is_active:
        raise InvalidStateError("Workspace is not active")

    views = []
    for project in _projects_of(db, workspace):
        if not project.is_active:
            continue
        views.extend(_task_view(t, project, workspace) for t in project.tasks if t.is_active)
    return views


def _workspaces_for_member(db: Session, user_id: UUID | str) -> list[Workspace]:
    # Membership lives inside the document, so filter after loading
    return [w for w in list_workspaces(db, is_active=True) if is_active_member(w, user_id)]


def list_workspaces_for_user(db: Session, user_id: UUID | str) -> list[WorkspaceSummary]:
    if not user_service.get_user_by_id(db, user_id):
        raise NotFoundError("User not found")
    return [
        WorkspaceSummary(id=w.id, name=w.name, img_url=w.img_url, members=w.members)
        for w in _workspaces_for_member(db, user_id)
    ]


def list_projects_for_user(db: Session, user_id: UUID | str) -> list[ProjectSummary]:
    """Active projects of every active workspace the user is an active member of."""
    if not user_service.get_user_by_id(db, user_id):
        raise NotFoundError("User not found")

    summaries = []
    for workspace in _workspaces_for_member(db, user_id):
        for project in _projects_of(db, workspace):
            if not project.is_active:
                continue
            summaries.append(
                ProjectSummary(
                    id=project.id,
                    name=project.name,
                    img_url=project.img_url,
                    workspace_id=workspace.id,
                    workspace_name=workspace.name,
                )
            )
    return summaries


def list_tasks_for_user(
    db: Session,
    user_id: UUID | str,
    project_name: str | None = None,
) -> list[TaskView]:
    """Active tasks assigned to the user, optionally within one project name."""
    if not user_service.get_user_by_id(db, user_id):
        raise NotFoundError("User not found")

    key = str(user_id)
    views = []
    for workspace in _workspaces_for_member(db, user_id):
        for project in _projects_of(db, workspace):
            if not project.is_active:
                continue
            if project_name and project.name != project_name:
                continue
            for task in project.tasks:
                if task.is_active and task.assignee and task.assignee.id == key:
                    views.append(_task_view(task, project, workspace))
    return views


def get_workspace_media(db: Session, workspace_id: UUID | str) -> WorkspaceMedia:
    """Split task attachment URLs of a workspace into images and documents."""
    workspace = get_workspace(db, workspace_id)
    images: list[MediaImage] = []
    documents: list[MediaDocument] = []

    projects = db.query(Project).filter(Project.workspace_id == workspace.id).all()
    for project in projects:
        for task in project.tasks:
            for attachment in task.attachments:
                if attachment.doc_type == DocType.IMAGE.value:
                    images.append(MediaImage(img_key=attachment.doc_name, img_url=attachment.doc_url))
                else:
                    documents.append(
                        MediaDocument(doc_name=attachment.doc_name, doc_url=attachment.doc_url)
                    )
    return WorkspaceMedia(img_urls=images, doc_urls=documents)
