"""Tests for workspace lifecycle, projects and cross-workspace views."""

import pytest

from taskwise.core.config import settings
from taskwise.db.enums import InviteStatus, MemberRole
from taskwise.schemas.project import AttachmentIn, ProjectCreate, ProjectUpdate, TaskCreate
from taskwise.schemas.workspace import WorkspaceCreate, WorkspaceUpdate
from taskwise.services import (
    membership_service,
    project_service,
    task_service,
    workspace_service,
)
from taskwise.services.errors import (
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
)


def _todo(project):
    return next(c for c in project.columns if c.title == "To Do")


def test_create_workspace_members_and_statuses(db, alice, bob):
    ws, statuses = workspace_service.create_workspace(
        db,
        alice,
        WorkspaceCreate(
            name="Design",
            member_emails=[bob.email, "ghost@test.com", alice.email, bob.email],
        ),
    )

    assert [s.status for s in statuses] == [
        InviteStatus.ADDED.value,
        InviteStatus.NOT_FOUND.value,
        InviteStatus.DUPLICATE.value,
        InviteStatus.DUPLICATE.value,
    ]
    assert [(m.user_id, m.role) for m in ws.members] == [
        (str(alice.id), MemberRole.ADMIN.value),
        (str(bob.id), MemberRole.MEMBER.value),
    ]
    assert all(m.is_active for m in ws.members)
    assert ws.img_url == settings.DEFAULT_WORKSPACE_IMG_URL
    assert ws.project_ids == []


def test_create_workspace_name_must_be_unique(db, workspace, alice):
    with pytest.raises(InvalidStateError):
        workspace_service.create_workspace(db, alice, WorkspaceCreate(name="Platform"))


def test_update_workspace_requires_admin(db, workspace, alice, bob):
    with pytest.raises(PermissionDeniedError):
        workspace_service.update_workspace(
            db, workspace.id, bob.id, WorkspaceUpdate(description="x")
        )

    updated = workspace_service.update_workspace(
        db, workspace.id, alice.id, WorkspaceUpdate(description="")
    )
    assert updated.description == ""
    assert updated.name == "Platform"


def test_deactivate_workspace(db, workspace, alice):
    updated = workspace_service.deactivate_workspace(db, workspace.id, alice.id)

    assert updated.is_active is False
    assert workspace_service.list_workspaces(db) == []
    assert workspace_service.list_workspaces(db, is_active=False) == [updated]


def test_get_workspace_unknown(db):
    with pytest.raises(NotFoundError):
        workspace_service.get_workspace(db, "1b8e9a0e-4a8a-4b7d-9d6e-0e8f1f6a2c33")
    with pytest.raises(InvalidArgumentError):
        workspace_service.get_workspace(db, "not-a-uuid")


def test_create_project_registers_in_workspace(db, workspace, project):
    assert workspace_service.get_workspace(db, workspace.id).project_ids == [str(project.id)]
    assert workspace_service.list_workspace_projects(db, workspace.id) == [project]


def test_create_project_with_custom_columns(db, workspace, alice):
    project = project_service.create_project(
        db,
        alice,
        ProjectCreate(name="Ops", workspace_id=workspace.id, column_titles=["Open", "Closed"]),
    )

    assert [c.title for c in project.columns] == ["Open", "Closed"]
    assert project.column_order == [c.id for c in project.columns]


def test_create_project_requires_membership(db, workspace, carol):
    with pytest.raises(PermissionDeniedError):
        project_service.create_project(
            db, carol, ProjectCreate(name="Ops", workspace_id=workspace.id)
        )


def test_update_and_deactivate_project(db, project, alice):
    updated = project_service.update_project(
        db, project.id, alice.id, ProjectUpdate(description="Q3 goals")
    )
    assert updated.description == "Q3 goals"
    assert updated.name == "Roadmap"

    deactivated = project_service.deactivate_project(db, project.id, alice.id)
    assert deactivated.is_active is False
    assert deactivated.deactivated_at is not None


def test_list_active_members_includes_profile(db, workspace, alice, bob):
    membership_service.remove_members(db, workspace.id, alice.id, [bob.email])

    members = workspace_service.list_active_members(db, workspace.id)

    assert [m.user.id for m in members] == [str(alice.id)]
    assert members[0].user.email == alice.email
    assert members[0].role == "Admin"


def test_workspace_tasks_skip_inactive_tasks_and_projects(db, workspace, project, alice):
    keep, _ = task_service.create_task(
        db, project.id, alice, TaskCreate(column_id=_todo(project).id, task_name="keep")
    )
    drop, _ = task_service.create_task(
        db, project.id, alice, TaskCreate(column_id=_todo(project).id, task_name="drop")
    )
    task_service.deactivate_task(db, project.id, drop)

    views = workspace_service.list_workspace_tasks(db, workspace.id)
    assert [v.id for v in views] == [keep]
    assert views[0].project == "Roadmap"
    assert views[0].workspace == "Platform"

    project_service.deactivate_project(db, project.id, alice.id)
    assert workspace_service.list_workspace_tasks(db, workspace.id) == []


def test_workspace_tasks_inactive_workspace(db, workspace, alice):
    workspace_service.deactivate_workspace(db, workspace.id, alice.id)

    with pytest.raises(InvalidStateError):
        workspace_service.list_workspace_tasks(db, workspace.id)


def test_views_for_user(db, workspace, project, alice, bob, carol):
    task_id, _ = task_service.create_task(
        db,
        project.id,
        alice,
        TaskCreate(column_id=_todo(project).id, task_name="review", assignee_user_id=bob.id),
    )

    assert [w.id for w in workspace_service.list_workspaces_for_user(db, bob.id)] == [workspace.id]
    assert [p.id for p in workspace_service.list_projects_for_user(db, bob.id)] == [project.id]
    assert [t.id for t in workspace_service.list_tasks_for_user(db, bob.id)] == [task_id]
    assert workspace_service.list_tasks_for_user(db, bob.id, project_name="Other") == []
    assert workspace_service.list_workspaces_for_user(db, carol.id) == []

    membership_service.exit_member(db, workspace.id, bob.id)
    assert workspace_service.list_tasks_for_user(db, bob.id) == []


def test_views_for_unknown_user(db):
    with pytest.raises(NotFoundError):
        workspace_service.list_projects_for_user(db, "6f1d2c3b-5a4e-4f7d-8e9a-0b1c2d3e4f50")


def test_workspace_media_splits_images_and_documents(db, workspace, project, alice):
    task_service.create_task(
        db,
        project.id,
        alice,
        TaskCreate(
            column_id=_todo(project).id,
            task_name="assets",
            attachments=[
                AttachmentIn(doc_type="image", doc_name="logo.png", doc_key="1-logo.png", doc_url="u1"),
                AttachmentIn(doc_type="document", doc_name="brief.pdf", doc_key="2-brief.pdf", doc_url="u2"),
            ],
        ),
    )

    media = workspace_service.get_workspace_media(db, workspace.id)

    assert [(i.img_key, i.img_url) for i in media.img_urls] == [("logo.png", "u1")]
    assert [(d.doc_name, d.doc_url) for d in media.doc_urls] == [("brief.pdf", "u2")]
