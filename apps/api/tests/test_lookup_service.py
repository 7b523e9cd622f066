"""Tests for the distinct-values lookup registry."""

import pytest

from taskwise.services import lookup_service, workspace_service
from taskwise.services.errors import InvalidArgumentError, NotFoundError


def test_distinct_workspace_names_skip_inactive(db, workspace, alice):
    assert lookup_service.distinct_values(db, "workspaces", "name") == ["Platform"]

    workspace_service.deactivate_workspace(db, workspace.id, alice.id)

    assert lookup_service.distinct_values(db, "workspaces", "name") == []


def test_distinct_user_emails(db, alice, bob):
    assert lookup_service.distinct_values(db, "users", "email") == sorted([alice.email, bob.email])


def test_unknown_collection(db):
    with pytest.raises(NotFoundError):
        lookup_service.distinct_values(db, "notifications", "message")


def test_field_outside_registry(db):
    with pytest.raises(InvalidArgumentError):
        lookup_service.distinct_values(db, "users", "password_hash")
