"""Helpers shared by the CRUD modules."""

from typing import TypeVar

from pydantic import BaseModel

from src.models.base import Base

M = TypeVar("M", bound=Base)


def apply_updates(obj: M, data: BaseModel) -> M:
    """Copy the fields the client actually sent onto an ORM object.

    An explicit null for a NOT NULL column is ignored rather than written.
    """
    columns = obj.__table__.columns
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field in columns and not columns[field].nullable:
            continue
        setattr(obj, field, value)
    return obj


def like(term: str) -> str:
    """Case-insensitive containment pattern, with LIKE wildcards escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
