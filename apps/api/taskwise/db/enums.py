"""Enum definitions for application constants."""

from enum import Enum


class MemberRole(str, Enum):
    """Role of a user inside a workspace."""
    ADMIN = "Admin"
    MEMBER = "Member"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


class TaskPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_


class DocType(str, Enum):
    """Attachment kinds accepted on tasks."""
    IMAGE = "image"
    DOCUMENT = "document"
    VIDEO = "video"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_


class AddMemberStatus(str, Enum):
    """Per-email outcome of adding members to a workspace."""
    ADDED = "Added successfully"
    REACTIVATED = "Member activated and added to workspace"
    ALREADY_ACTIVE = "Member already in workspace"
    USER_NOT_FOUND = "User not found"


class RemoveMemberStatus(str, Enum):
    """Per-email outcome of removing members from a workspace."""
    DEACTIVATED = "Deactivated successfully"
    ALREADY_INACTIVE = "Member already inactive"
    NOT_A_MEMBER = "Member not found in workspace"
    CANNOT_REMOVE_SELF = "Admin user cannot remove themselves"
    USER_NOT_FOUND = "User not found"


class InviteStatus(str, Enum):
    """Per-email outcome when a workspace is created with member emails."""
    ADDED = "Added"
    NOT_FOUND = "Not Found"
    DUPLICATE = "Already added"


DEFAULT_COLUMN_TITLES = ("To Do", "In Progress", "Done")
