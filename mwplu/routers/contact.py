from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field

from ..dependencies.services import get_db_service
from ..services.db_service import DbService
from .common import respond

router = APIRouter()


class ContactIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    message: str = Field(min_length=1, max_length=10000)


class ResearchEntry(BaseModel):
    city_id: Optional[str] = None
    address_input: Optional[str] = None
    geo_lon: Optional[float] = None
    geo_lat: Optional[float] = None
    zone_label: Optional[str] = None
    success: bool = False
    reason: Optional[str] = None


@router.post("/contact")
def submit_contact(payload: ContactIn, service: DbService = Depends(get_db_service)):
    return respond(service.submit_contact(payload.name, str(payload.email), payload.message))


@router.post("/research-history")
def log_research(payload: ResearchEntry, service: DbService = Depends(get_db_service)):
    return respond(service.log_research_history(payload.model_dump()))
