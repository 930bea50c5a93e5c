from __future__ import annotations

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterable, Iterator

from sqlalchemy.orm import Session


def generate_id() -> str:
    return str(uuid.uuid4())


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Normalize aware datetimes to naive UTC for storage."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


@contextmanager
def atomic(session: Session) -> Iterator[Session]:
    """Run a block of writes as one transaction: commit on success, roll back on error."""
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


def replace_children(session: Session, parent, attr: str, rows: Iterable) -> None:
    """Replace a one-to-many collection wholesale inside the caller's transaction.

    The old rows are deleted (delete-orphan cascade) and flushed before the new
    ones are attached, so unique constraints on the child table never see both
    generations at once. Callers wrap this in ``atomic`` so readers never
    observe the empty intermediate state.
    """
    collection = getattr(parent, attr)
    collection.clear()
    session.flush()
    for idx, row in enumerate(rows):
        if hasattr(row, "sort_order"):
            row.sort_order = idx
        collection.append(row)

