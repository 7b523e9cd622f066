"""Lookup service - distinct existing values for client-side uniqueness checks."""

from sqlalchemy.orm import Session

from taskwise.db.models import Project, User, Workspace
from taskwise.services.errors import InvalidArgumentError, NotFoundError

# collection name -> (model, queryable fields)
LOOKUP_REGISTRY = {
    "users": (User, ("username", "email")),
    "workspaces": (Workspace, ("name",)),
    "projects": (Project, ("name",)),
}


def distinct_values(db: Session, collection: str, key: str) -> list[str]:
    """Sorted distinct values of one field; inactive rows are skipped."""
    entry = LOOKUP_REGISTRY.get(collection)
    if entry is None:
        raise NotFoundError(f"Unknown collection '{collection}'")
    model, fields = entry
    if key not in fields:
        raise InvalidArgumentError(f"Field '{key}' is not available for {collection}")

    column = getattr(model, key)
    query = db.query(column).distinct()
    if hasattr(model, "is_active"):
        query = query.filter(model.is_active.is_(True))
    return sorted(value for (value,) in query.all() if value is not None)
