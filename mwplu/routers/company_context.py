from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ..dependencies.auth import require_user
from ..dependencies.services import get_db_service
from ..services.auth import AuthUser
from ..services.db_service import DbService
from .common import respond

router = APIRouter(prefix="/company-context")


class CompanyContextIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    mission: str = ""
    values: list[str] = Field(default_factory=list)
    tone: str = ""
    messaging: str = ""
    brand_voice_guidelines: str = Field(default="", alias="brandVoiceGuidelines")
    is_active: bool = Field(default=True, alias="isActive")


@router.get("/active")
def get_active_context(service: DbService = Depends(get_db_service)):
    return respond(service.get_active_company_context())


@router.post("")
def save_context(
    payload: CompanyContextIn,
    user: AuthUser = Depends(require_user),
    service: DbService = Depends(get_db_service),
):
    return respond(service.save_company_context(payload.model_dump(by_alias=True)))
