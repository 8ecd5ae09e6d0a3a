from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ..dependencies.auth import require_user
from ..dependencies.services import get_db_service
from ..services.auth import AuthUser
from ..services.db_service import DbService
from .common import respond

router = APIRouter(prefix="/profiles")


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    pseudo: Optional[str] = None
    avatar_url: Optional[str] = None


@router.get("")
def list_profiles(
    ids: list[str] = Query(default=[]),
    user: AuthUser = Depends(require_user),
    service: DbService = Depends(get_db_service),
):
    return respond(service.get_profiles_by_ids(ids))


@router.post("/me/ensure")
def ensure_my_profile(user: AuthUser = Depends(require_user), service: DbService = Depends(get_db_service)):
    return respond(service.ensure_user_profile(user))


@router.get("/me")
def get_my_profile(user: AuthUser = Depends(require_user), service: DbService = Depends(get_db_service)):
    return respond(service.get_user_profile(user.id))


@router.patch("/me")
def update_my_profile(
    payload: ProfileUpdate,
    user: AuthUser = Depends(require_user),
    service: DbService = Depends(get_db_service),
):
    return respond(service.update_user_profile(user.id, payload.model_dump(exclude_unset=True)))


@router.get("/{user_id}")
def get_profile(user_id: str, user: AuthUser = Depends(require_user), service: DbService = Depends(get_db_service)):
    if user_id == str(user.id):
        return respond(service.get_user_profile(user.id))
    # other users only get the public columns
    result = service.get_profiles_by_ids([user_id])
    if result.get("success"):
        result["data"] = (result["data"] or [None])[0]
    return respond(result)
