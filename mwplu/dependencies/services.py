from __future__ import annotations

from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from ..services.auth import AuthUser
from ..services.db_service import DbService
from ..services.storage import get_storage_service
from .auth import optional_user
from .db import get_db


def get_db_service(
    db: Optional[Session] = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_user),
) -> DbService:
    return DbService(db, user, storage_factory=get_storage_service)
