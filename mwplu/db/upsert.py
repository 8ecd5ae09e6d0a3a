from __future__ import annotations

from typing import Any, Iterable, Sequence

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert(
    db: Session,
    model: Any,
    rows: dict[str, Any] | Sequence[dict[str, Any]],
    conflict_columns: Iterable[str],
    *,
    returning: bool = True,
) -> list[Any]:
    """INSERT ... ON CONFLICT DO UPDATE for the dialects we deploy on.

    Every provided column except the conflict target is overwritten on conflict.
    """
    dialect = db.get_bind().dialect.name
    try:
        insert = _DIALECT_INSERTS[dialect]
    except KeyError as exc:
        raise RuntimeError(f"Upsert is not supported on dialect {dialect!r}") from exc

    values = [rows] if isinstance(rows, dict) else list(rows)
    if not values:
        return []

    conflict = list(conflict_columns)
    stmt = insert(model).values(values)
    updatable = [key for key in values[0] if key not in conflict]
    if updatable:
        stmt = stmt.on_conflict_do_update(
            index_elements=conflict,
            set_={key: stmt.excluded[key] for key in updatable},
        )
    else:
        stmt = stmt.on_conflict_do_nothing(index_elements=conflict)

    if not returning:
        db.execute(stmt)
        return []

    result = db.scalars(stmt.returning(model), execution_options={"populate_existing": True})
    return list(result.all())
