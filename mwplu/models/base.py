from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")
UUIDType = Uuid(as_uuid=True)

_ModelBase = declarative_base()


def _jsonable(value: Any) -> Any:
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class Base(_ModelBase):  # type: ignore[misc, valid-type]
    __abstract__ = True

    def as_dict(self, *columns: str) -> dict[str, Any]:
        """Row as a JSON-ready dict, optionally limited to ``columns``."""
        names = columns or tuple(column.key for column in self.__table__.columns)
        return {name: _jsonable(getattr(self, name)) for name in names}
