"""Membership service - the member ledger of a workspace and its admin invariant."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from taskwise.db.documents import Member
from taskwise.db.enums import AddMemberStatus, MemberRole, RemoveMemberStatus
from taskwise.db.models import Workspace
from taskwise.schemas.workspace import EmailStatus
from taskwise.services import user_service, workspace_service
from taskwise.services.errors import InvalidArgumentError, InvalidStateError, NotFoundError

logger = logging.getLogger(__name__)


def _other_active_admins(workspace: Workspace, user_id: str) -> list[Member]:
    return [
        m
        for m in workspace_service.active_members(workspace)
        if m.role == MemberRole.ADMIN.value and m.user_id != user_id
    ]


def _save_members(db: Session, workspace: Workspace) -> Workspace:
    flag_modified(workspace, "members")
    db.commit()
    db.refresh(workspace)
    return workspace


def add_members(
    db: Session,
    workspace_id: UUID | str,
    requesting_user_id: UUID | str,
    emails: list[str],
    role: MemberRole | None = None,
) -> tuple[Workspace, list[EmailStatus]]:
    """
    Add users to a workspace by email.

    Unknown emails and already-active members are reported per email; the call
    itself succeeds. A previously removed member is reactivated in place and
    keeps the role they had; ``role`` only applies to new entries. Use
    update_member_role to change a reactivated member's role.
    """
    workspace = workspace_service.get_workspace(db, workspace_id)
    workspace_service.require_active_admin(workspace, requesting_user_id)

    new_role = (role or MemberRole.MEMBER).value
    now = datetime.now(timezone.utc)
    statuses: list[EmailStatus] = []

    for email in emails:
        user = user_service.get_user_by_email(db, email)
        if not user:
            statuses.append(EmailStatus(email=email, status=AddMemberStatus.USER_NOT_FOUND.value))
            continue

        member = workspace_service.find_member(workspace, user.id)
        if member is None:
            workspace.members.append(Member(user_id=str(user.id), role=new_role, joined_at=now))
            status = AddMemberStatus.ADDED
        elif not member.is_active:
            member.is_active = True
            member.joined_at = now
            member.deactivated_at = None
            status = AddMemberStatus.REACTIVATED
        else:
            status = AddMemberStatus.ALREADY_ACTIVE
        statuses.append(EmailStatus(email=email, status=status.value))

    _save_members(db, workspace)
    logger.info(
        "Processed %d member additions for workspace %s", len(emails), workspace.id
    )
    return workspace, statuses


def remove_members(
    db: Session,
    workspace_id: UUID | str,
    requesting_user_id: UUID | str,
    emails: list[str],
) -> tuple[Workspace, list[EmailStatus]]:
    """
    Deactivate members by email (admin only).

    The requesting admin cannot remove themselves here; they leave through
    exit_member, which enforces the admin guard.
    """
    workspace = workspace_service.get_workspace(db, workspace_id)
    workspace_service.require_active_admin(workspace, requesting_user_id)

    requester = str(requesting_user_id)
    now = datetime.now(timezone.utc)
    statuses: list[EmailStatus] = []

    for email in emails:
        user = user_service.get_user_by_email(db, email)
        if not user:
            status = RemoveMemberStatus.USER_NOT_FOUND
        elif str(user.id) == requester:
            status = RemoveMemberStatus.CANNOT_REMOVE_SELF
        else:
            member = workspace_service.find_member(workspace, user.id)
            if member is None:
                status = RemoveMemberStatus.NOT_A_MEMBER
            elif not member.is_active:
                status = RemoveMemberStatus.ALREADY_INACTIVE
            else:
                member.is_active = False
                member.deactivated_at = now
                status = RemoveMemberStatus.DEACTIVATED
        statuses.append(EmailStatus(email=email, status=status.value))

    _save_members(db, workspace)
    return workspace, statuses


def exit_member(db: Session, workspace_id: UUID | str, user_id: UUID | str) -> Workspace:
    """
    Leave a workspace.

    An Admin with no other active Admin cannot leave while other active
    members remain. When the last active member leaves, the workspace is
    retired.
    """
    workspace = workspace_service.get_workspace(db, workspace_id)
    member = workspace_service.find_member(workspace, user_id)
    if member is None:
        raise NotFoundError("Member not found in workspace")
    if not member.is_active:
        raise InvalidStateError("Member is already inactive")

    if member.role == MemberRole.ADMIN.value:
        others_active = [
            m for m in workspace_service.active_members(workspace) if m.user_id != member.user_id
        ]
        if others_active and not _other_active_admins(workspace, member.user_id):
            raise InvalidStateError(
                "Cannot exit workspace as the only admin. Assign another admin first"
            )

    member.is_active = False
    member.deactivated_at = datetime.now(timezone.utc)

    if not workspace_service.active_members(workspace):
        workspace_service.retire_workspace(workspace)
        logger.info("Workspace %s retired after its last member left", workspace.id)

    return _save_members(db, workspace)


def update_member_role(
    db: Session,
    workspace_id: UUID | str,
    requesting_user_id: UUID | str,
    target_user_id: UUID | str,
    role: str,
) -> Workspace:
    """
    Change a member's role (admin only).

    Demoting the last active Admin is refused while other active members
    remain, the same rule exit_member applies.
    """
    if not MemberRole.has_value(role):
        raise InvalidArgumentError("Invalid role. Must be 'Admin' or 'Member'")

    workspace = workspace_service.get_workspace(db, workspace_id)
    workspace_service.require_active_admin(workspace, requesting_user_id)

    member = workspace_service.find_member(workspace, target_user_id)
    if member is None:
        raise NotFoundError("Member not found in workspace")

    demoting = (
        member.is_active
        and member.role == MemberRole.ADMIN.value
        and role == MemberRole.MEMBER.value
    )
    if demoting and not _other_active_admins(workspace, member.user_id):
        others_active = [
            m for m in workspace_service.active_members(workspace) if m.user_id != member.user_id
        ]
        if others_active:
            raise InvalidStateError("Cannot demote the only admin. Assign another admin first")

    member.role = role
    logger.info("Member %s role set to %s in workspace %s", member.user_id, role, workspace.id)
    return _save_members(db, workspace)
