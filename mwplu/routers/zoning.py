from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..dependencies.services import get_db_service
from ..services.db_service import DbService
from .common import respond

router = APIRouter()


@router.get("/cities")
def list_cities(service: DbService = Depends(get_db_service)):
    return respond(service.get_cities())


@router.get("/cities/{city_id}/zonings")
def list_zonings(city_id: str, service: DbService = Depends(get_db_service)):
    return respond(service.get_zonings(city_id))


@router.get("/zonings/{zoning_id}/zones")
def list_zones(zoning_id: str, service: DbService = Depends(get_db_service)):
    return respond(service.get_zones(zoning_id))


@router.get("/typologies")
def list_typologies(service: DbService = Depends(get_db_service)):
    return respond(service.get_typologies())


@router.get("/documents/search")
def search_documents(
    city_id: Optional[str] = Query(default=None),
    zoning_id: Optional[str] = Query(default=None),
    zone_id: Optional[str] = Query(default=None),
    search_text: Optional[str] = Query(default=None),
    service: DbService = Depends(get_db_service),
):
    params = {"city_id": city_id, "zoning_id": zoning_id, "zone_id": zone_id, "search_text": search_text}
    return respond(service.search_documents(params))


@router.get("/documents")
def get_document(
    zoning_id: str = Query(...),
    zone_id: str = Query(...),
    service: DbService = Depends(get_db_service),
):
    return respond(service.get_document(zoning_id, zone_id))
