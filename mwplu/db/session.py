from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import scoped_session, sessionmaker

from ..config import settings


engine = create_engine(settings.database_url, pool_pre_ping=True) if settings.database_url else None
SessionLocal = scoped_session(sessionmaker(autoflush=False, bind=engine))


def is_configured() -> bool:
    return engine is not None
