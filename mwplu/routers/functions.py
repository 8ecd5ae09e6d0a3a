from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..dependencies.auth import optional_user
from ..dependencies.db import get_db
from ..services.auth import AuthUser
from ..services.functions import FunctionError, available_functions, invoke
from ..services.storage import get_storage_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions")


@router.get("")
def list_functions():
    return {"functions": available_functions()}


@router.post("/{name}")
def call_function(
    name: str,
    body: Optional[dict[str, Any]] = Body(default=None),
    db: Optional[Session] = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_user),
):
    try:
        return {"data": invoke(name, body, session=db, user=user, storage_factory=get_storage_service)}
    except FunctionError as exc:
        if db is not None:
            db.rollback()
        return JSONResponse(status_code=exc.status, content=exc.payload)
    except (ValueError, LookupError) as exc:
        if db is not None:
            db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
