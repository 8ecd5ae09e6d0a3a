from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from ..dependencies.auth import require_user
from ..dependencies.services import get_db_service
from ..services.auth import AuthUser
from ..services.db_service import DbService
from .common import respond

router = APIRouter(prefix="/blog")


class ArticleMetadata(BaseModel):
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = None
    category_id: Optional[str] = None
    cover_image_url: Optional[str] = None


class DraftIn(ArticleMetadata):
    content: Optional[str] = None
    tag_ids: Optional[list[str]] = None


class ScheduleIn(BaseModel):
    scheduled_at: Optional[datetime] = None


class TagsIn(BaseModel):
    tag_ids: list[str] = Field(default_factory=list)


class GenerateIn(BaseModel):
    topic: Optional[str] = None
    title: Optional[str] = None
    focus_keyword: Optional[str] = None
    audience: Optional[str] = None
    tone: Optional[str] = None
    word_count: Optional[int] = None


class SeoIn(BaseModel):
    article_id: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = None
    slug: Optional[str] = None
    content: Optional[str] = None
    focus_keyword: Optional[str] = None
    persist: bool = False


class AnalyticsIn(BaseModel):
    article_id: Optional[str] = None
    event_type: str = Field(min_length=1)
    metadata: dict[str, Any] = Field(default_factory=dict)


@router.get("/articles")
def list_articles(
    status: str = Query(default="all"),
    page: int = Query(default=1),
    page_size: int = Query(default=10, alias="pageSize"),
    search: Optional[str] = Query(default=None),
    service: DbService = Depends(get_db_service),
):
    return respond(service.list_blog_articles({"status": status, "page": page, "pageSize": page_size, "search": search}))


@router.post("/articles")
def create_draft(
    payload: DraftIn,
    user: AuthUser = Depends(require_user),
    service: DbService = Depends(get_db_service),
):
    return respond(service.upsert_blog_draft(None, payload.model_dump(exclude_unset=True)))


@router.get("/articles/{article_id}")
def get_article(article_id: str, service: DbService = Depends(get_db_service)):
    return respond(service.get_blog_article_by_id(article_id))


@router.put("/articles/{article_id}")
def update_draft(
    article_id: str,
    payload: DraftIn,
    user: AuthUser = Depends(require_user),
    service: DbService = Depends(get_db_service),
):
    return respond(service.upsert_blog_draft(article_id, payload.model_dump(exclude_unset=True)))


@router.post("/articles/{article_id}/ready")
def mark_ready(
    article_id: str,
    payload: ArticleMetadata | None = None,
    user: AuthUser = Depends(require_user),
    service: DbService = Depends(get_db_service),
):
    return respond(service.mark_article_ready(article_id, payload.model_dump() if payload else None))


@router.post("/articles/{article_id}/schedule")
def schedule(
    article_id: str,
    payload: ScheduleIn | None = None,
    user: AuthUser = Depends(require_user),
    service: DbService = Depends(get_db_service),
):
    return respond(service.schedule_article(article_id, payload.model_dump() if payload else None))


@router.post("/articles/{article_id}/publish")
def publish(
    article_id: str,
    payload: ArticleMetadata | None = None,
    user: AuthUser = Depends(require_user),
    service: DbService = Depends(get_db_service),
):
    return respond(service.publish_article(article_id, payload.model_dump() if payload else None))


@router.post("/articles/{article_id}/archive")
def archive(article_id: str, user: AuthUser = Depends(require_user), service: DbService = Depends(get_db_service)):
    return respond(service.archive_article(article_id))


@router.get("/articles/{article_id}/tags")
def get_article_tags(article_id: str, service: DbService = Depends(get_db_service)):
    return respond(service.get_article_tag_ids(article_id))


@router.put("/articles/{article_id}/tags")
def set_article_tags(
    article_id: str,
    payload: TagsIn,
    user: AuthUser = Depends(require_user),
    service: DbService = Depends(get_db_service),
):
    return respond(service.set_article_tags(article_id, payload.tag_ids))


@router.get("/categories")
def list_categories(service: DbService = Depends(get_db_service)):
    return respond(service.get_blog_categories())


@router.get("/tags")
def list_tags(service: DbService = Depends(get_db_service)):
    return respond(service.get_blog_tags())


@router.post("/generate")
def generate(payload: GenerateIn, user: AuthUser = Depends(require_user), service: DbService = Depends(get_db_service)):
    return respond(service.generate_blog_content(payload.model_dump(exclude_none=True)))


@router.post("/seo/validate")
def validate_seo(payload: SeoIn, service: DbService = Depends(get_db_service)):
    return respond(service.validate_seo(payload.model_dump(exclude_none=True)))


@router.post("/analytics")
def analytics(
    payload: AnalyticsIn,
    user: AuthUser = Depends(require_user),
    service: DbService = Depends(get_db_service),
):
    return respond(service.send_blog_analytics_event(payload.model_dump(exclude_none=True)))
