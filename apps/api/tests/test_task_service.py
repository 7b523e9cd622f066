"""Tests for the task lifecycle and its assignment notifications."""

from datetime import datetime, timezone

import pytest

from taskwise.db.models import Notification, Project
from taskwise.schemas.project import AttachmentIn, TaskCreate, TaskUpdate
from taskwise.services import membership_service, notification_service, task_service
from taskwise.services.errors import InvalidArgumentError, NotFoundError


def _todo(project):
    return next(c for c in project.columns if c.title == "To Do")


def _notifications(db, user):
    return db.query(Notification).filter(Notification.user_id == user.id).all()


def _create(db, project, creator, **fields):
    data = TaskCreate(column_id=_todo(project).id, task_name="Ship it", **fields)
    return task_service.create_task(db, project.id, creator, data)


def test_create_task_places_id_in_column(db, project, alice):
    task_id, updated = _create(db, project, alice, priority="High")

    task = next(t for t in updated.tasks if t.id == task_id)
    assert task.task_name == "Ship it"
    assert task.priority == "High"
    assert task.is_active is True
    assert task.created_by.id == str(alice.id)
    assert _todo(updated).task_ids == [task_id]


def test_create_task_with_assignee_notifies_once(db, project, alice, bob):
    task_id, updated = _create(db, project, alice, assignee_user_id=bob.id)

    task = next(t for t in updated.tasks if t.id == task_id)
    assert task.assignee.id == str(bob.id)
    assert task.assignee.email == bob.email

    notifications = _notifications(db, bob)
    assert len(notifications) == 1
    assert notifications[0].task_id == task_id
    assert notifications[0].project_id == project.id
    assert notifications[0].is_read is False
    assert "<taskName>Ship it</taskName>" in notifications[0].message
    assert "<projectName>Roadmap</projectName>" in notifications[0].message
    assert "<workspaceName>Platform</workspaceName>" in notifications[0].message


def test_self_assignment_does_not_notify(db, project, alice):
    _create(db, project, alice, assignee_user_id=alice.id)

    assert _notifications(db, alice) == []


def test_create_task_rejects_non_member_assignee(db, project, alice, carol):
    with pytest.raises(InvalidArgumentError):
        _create(db, project, alice, assignee_user_id=carol.id)


def test_create_task_rejects_inactive_member_assignee(db, workspace, project, alice, bob):
    membership_service.remove_members(db, workspace.id, alice.id, [bob.email])

    with pytest.raises(InvalidArgumentError):
        _create(db, project, alice, assignee_user_id=bob.id)


def test_create_task_rejects_bad_priority(db, project, alice):
    with pytest.raises(InvalidArgumentError):
        _create(db, project, alice, priority="Urgent")


@pytest.mark.parametrize(
    "attachment",
    [
        AttachmentIn(doc_type="spreadsheet", doc_name="a", doc_key="k", doc_url="u"),
        AttachmentIn(doc_type="image", doc_name="", doc_key="k", doc_url="u"),
    ],
)
def test_create_task_rejects_bad_attachment(db, project, alice, attachment):
    with pytest.raises(InvalidArgumentError):
        _create(db, project, alice, attachments=[attachment])

    assert db.get(Project, project.id).tasks == []


def test_create_task_unknown_column(db, project, alice):
    with pytest.raises(NotFoundError):
        task_service.create_task(
            db, project.id, alice, TaskCreate(column_id="missing", task_name="x")
        )


def test_create_task_requires_workspace_claim(db, workspace, project, alice):
    workspace.project_ids = []
    db.commit()

    with pytest.raises(NotFoundError):
        _create(db, project, alice)


def test_notification_failure_does_not_undo_task(db, project, alice, bob, monkeypatch):
    def _boom(*args, **kwargs):
        raise RuntimeError("notification store down")

    monkeypatch.setattr(notification_service, "create_notification", _boom)

    task_id, updated = _create(db, project, alice, assignee_user_id=bob.id)

    assert any(t.id == task_id for t in db.get(Project, project.id).tasks)
    assert _notifications(db, bob) == []


def test_update_task_applies_present_fields_only(db, project, alice):
    task_id, _ = _create(db, project, alice, priority="Low")
    due = datetime(2027, 1, 15, tzinfo=timezone.utc)

    updated = task_service.update_task(
        db, project.id, task_id, TaskUpdate(content="", due_date=due)
    )

    task = next(t for t in updated.tasks if t.id == task_id)
    assert task.content == ""
    assert task.due_date == due
    assert task.task_name == "Ship it"
    assert task.priority == "Low"


def test_update_task_reassign_notifies_new_assignee(db, project, alice, bob):
    task_id, _ = _create(db, project, alice)
    assert _notifications(db, bob) == []

    task_service.update_task(db, project.id, task_id, TaskUpdate(assignee_user_id=bob.id))
    task_service.update_task(db, project.id, task_id, TaskUpdate(task_name="Renamed"))

    assert len(_notifications(db, bob)) == 1


def test_update_task_reassign_to_creator_does_not_notify(db, project, alice, bob):
    task_id, _ = _create(db, project, alice, assignee_user_id=bob.id)

    updated = task_service.update_task(
        db, project.id, task_id, TaskUpdate(assignee_user_id=alice.id)
    )

    assert next(t for t in updated.tasks if t.id == task_id).assignee.id == str(alice.id)
    assert _notifications(db, alice) == []


def test_update_task_same_assignee_does_not_renotify(db, project, alice, bob):
    task_id, _ = _create(db, project, alice, assignee_user_id=bob.id)

    task_service.update_task(db, project.id, task_id, TaskUpdate(assignee_user_id=bob.id))

    assert len(_notifications(db, bob)) == 1


def test_update_task_null_assignee_unassigns(db, project, alice, bob):
    task_id, _ = _create(db, project, alice, assignee_user_id=bob.id)

    updated = task_service.update_task(
        db, project.id, task_id, TaskUpdate(assignee_user_id=None)
    )

    assert next(t for t in updated.tasks if t.id == task_id).assignee is None


def test_update_task_rejects_bad_priority_without_side_effects(db, project, alice):
    task_id, _ = _create(db, project, alice)

    with pytest.raises(InvalidArgumentError):
        task_service.update_task(
            db, project.id, task_id, TaskUpdate(task_name="Changed", priority="Critical")
        )

    assert task_service.get_task(db, project.id, task_id).task_name == "Ship it"


def test_update_task_unknown_task(db, project):
    with pytest.raises(NotFoundError):
        task_service.update_task(db, project.id, "missing", TaskUpdate(content="x"))


def test_deactivate_task_purges_every_column(db, project, alice):
    task_id, project = _create(db, project, alice)
    order = list(project.column_order)
    column_ids = [c.id for c in project.columns]

    updated = task_service.deactivate_task(db, project.id, task_id)

    task = next(t for t in updated.tasks if t.id == task_id)
    assert task.is_active is False
    assert task.deactivated_at is not None
    assert all(task_id not in c.task_ids for c in updated.columns)
    assert updated.column_order == order
    assert [c.id for c in updated.columns] == column_ids


def test_add_comment_snapshots_author(db, project, alice, bob):
    task_id, _ = _create(db, project, alice)

    updated = task_service.add_comment(db, project.id, task_id, bob, "Looks good")

    comments = next(t for t in updated.tasks if t.id == task_id).comments
    assert len(comments) == 1
    assert comments[0].comment == "Looks good"
    assert comments[0].user.id == str(bob.id)
    assert comments[0].user.username == "Bob"


def test_add_comment_requires_text(db, project, alice):
    task_id, _ = _create(db, project, alice)

    with pytest.raises(InvalidArgumentError):
        task_service.add_comment(db, project.id, task_id, alice, "  ")
