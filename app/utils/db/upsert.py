"""
Conflict-aware insert keyed on an entity identifier.

Uses the dialect's native ``INSERT ... ON CONFLICT`` so concurrent callers
writing the same key collapse into one row instead of failing.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def insert_or_update(
    db: Session,
    model: Any,
    key: str,
    values: Mapping[str, Any],
    update_fields: Optional[Sequence[str]] = None,
) -> None:
    """
    Insert ``values`` into ``model``'s table; on a ``key`` conflict update only
    ``update_fields``. With no update fields the conflicting insert is a no-op.

    Does not commit; the caller owns the transaction.
    """
    dialect = db.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise NotImplementedError(f"Upsert is not supported for dialect {dialect!r}")

    table = model.__table__
    row = dict(values)
    stmt = insert(table).values(**row)

    if not update_fields:
        stmt = stmt.on_conflict_do_nothing(index_elements=[key])
    else:
        set_ = {field: stmt.excluded[field] for field in update_fields}
        # ON CONFLICT bypasses column onupdate hooks
        if "updated_at" in table.c:
            set_["updated_at"] = datetime.now(timezone.utc)
        stmt = stmt.on_conflict_do_update(index_elements=[key], set_=set_)

    db.execute(stmt)
