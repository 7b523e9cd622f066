"""Structured logging helpers (PII-safe)."""

from typing import Any


def build_log_context(
    *,
    user_id: str | None = None,
    workspace_id: str | None = None,
    project_id: str | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """
    Build the ``extra`` dict for a log record.

    Only identifiers and request metadata go in; emails and names never do.
    Empty values are left out so log lines stay short.
    """
    fields = {
        "user_id": user_id,
        "workspace_id": workspace_id,
        "project_id": project_id,
        "request_id": request_id,
        "route": route,
        "method": method,
    }
    return {key: value for key, value in fields.items() if value}
