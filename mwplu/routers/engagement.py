from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..dependencies.services import get_db_service
from ..services.db_service import DbService
from .common import respond

router = APIRouter()


class CommentIn(BaseModel):
    content: str = Field(min_length=1, max_length=5000)


class RatingIn(BaseModel):
    rating: int = Field(ge=1, le=5)


class DownloadIn(BaseModel):
    type: str = "pdf"


@router.get("/documents/{document_id}/comments")
def list_comments(document_id: str, service: DbService = Depends(get_db_service)):
    return respond(service.get_comments(document_id))


@router.post("/documents/{document_id}/comments")
def add_comment(document_id: str, payload: CommentIn, service: DbService = Depends(get_db_service)):
    return respond(service.add_comment(document_id, payload.content))


@router.delete("/comments/{comment_id}")
def delete_comment(comment_id: str, service: DbService = Depends(get_db_service)):
    return respond(service.delete_comment(comment_id))


@router.post("/comments/{comment_id}/restore")
def restore_comment(comment_id: str, service: DbService = Depends(get_db_service)):
    return respond(service.restore_comment(comment_id))


@router.get("/documents/{document_id}/ratings")
def list_ratings(document_id: str, service: DbService = Depends(get_db_service)):
    return respond(service.get_ratings(document_id))


@router.get("/documents/{document_id}/ratings/me")
def get_my_rating(document_id: str, service: DbService = Depends(get_db_service)):
    return respond(service.get_user_rating(document_id))


@router.put("/documents/{document_id}/ratings/me")
def submit_rating(document_id: str, payload: RatingIn, service: DbService = Depends(get_db_service)):
    return respond(service.submit_rating(document_id, payload.rating))


@router.delete("/documents/{document_id}/ratings/me")
def delete_rating(document_id: str, service: DbService = Depends(get_db_service)):
    return respond(service.delete_rating(document_id))


@router.post("/documents/{document_id}/downloads")
def track_download(document_id: str, payload: DownloadIn | None = None, service: DbService = Depends(get_db_service)):
    return respond(service.track_download(document_id, (payload or DownloadIn()).type))


@router.post("/documents/{document_id}/downloads/limited")
def request_limited_download(document_id: str, service: DbService = Depends(get_db_service)):
    return respond(service.request_limited_download(document_id))


@router.get("/documents/{document_id}/downloads/stats")
def download_stats(document_id: str, service: DbService = Depends(get_db_service)):
    return respond(service.get_download_stats(document_id))


@router.get("/downloads/me")
def my_download_count(service: DbService = Depends(get_db_service)):
    return respond(service.get_user_download_count())
