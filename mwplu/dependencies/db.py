from __future__ import annotations

from typing import Iterator, Optional

from sqlalchemy.orm import Session

from ..db.session import SessionLocal, is_configured


def get_db() -> Iterator[Optional[Session]]:
    if not is_configured():
        yield None
        return

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
