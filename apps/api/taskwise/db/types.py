"""Custom SQLAlchemy types for embedded document collections."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON, TypeDecorator


class DocumentList(TypeDecorator):
    """
    Store a list of pydantic models as one JSON array (JSONB on PostgreSQL).

    Values are validated into ``model`` on load and dumped in JSON mode on
    save. In-place mutation is not tracked; call ``flag_modified`` after
    changing an element.
    """

    impl = JSON
    cache_ok = True

    def __init__(self, model: type[BaseModel], *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.model = model

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value, dialect):
        if value is None:
            return []
        return [
            item.model_dump(mode="json") if isinstance(item, BaseModel) else item
            for item in value
        ]

    def process_result_value(self, value, dialect):
        if value is None:
            return []
        return [self.model.model_validate(item) for item in value]


class StringList(TypeDecorator):
    """Ordered list of string ids stored as a JSON array."""

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value, dialect):
        if value is None:
            return []
        return [str(item) for item in value]

    def process_result_value(self, value, dialect):
        if value is None:
            return []
        return list(value)
