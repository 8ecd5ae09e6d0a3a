from __future__ import annotations

import logging
import re
import unicodedata
from datetime import datetime, timezone
from typing import Any, Mapping

from sqlalchemy import delete, func, select

from ..models import BlogArticle, BlogArticleStatusEnum, BlogArticleTag, BlogCategory, BlogTag
from .base import Envelope, as_uuid, ok, service_call, utcnow
from .metrics import record_status_change
from .profiles import ProfileService
from .seo import slug_from_canonical

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50

LIST_COLUMNS = (
    "id",
    "title",
    "slug",
    "status",
    "updated_at",
    "meta_title",
    "meta_description",
    "category_id",
    "author_id",
)

# Fields the editor may send; everything else in a payload is ignored.
_METADATA_FIELDS = ("meta_title", "meta_description", "canonical_url", "category_id", "cover_image_url")


def simulated_articles() -> list[dict[str, Any]]:
    """Fixed dataset served when the database is not configured."""
    now = utcnow().isoformat()
    return [
        {"id": "draft-1", "title": "Brouillon 1", "status": "draft", "updated_at": now},
        {"id": "draft-2", "title": "Brouillon 2", "status": "draft", "updated_at": now},
        {"id": "draft-3", "title": "Brouillon 3", "status": "draft", "updated_at": now},
        {"id": "sched-1", "title": "Planifié", "status": "scheduled", "updated_at": now},
        {"id": "pub-1", "title": "Publié", "status": "published", "updated_at": now},
    ]


def slugify(value: str) -> str:
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    return number or default


def parse_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_uuid(value: Any, label: str):
    return as_uuid(value, label) if value else None


class BlogService(ProfileService):
    # --- Edge functions ----------------------------------------------------
    @service_call("Error generating blog content")
    def generate_blog_content(self, payload: Mapping[str, Any]) -> Envelope:
        return ok(self.invoke_function("generate-blog-content", dict(payload)))

    @service_call("Error validating SEO")
    def validate_seo(self, payload: Mapping[str, Any]) -> Envelope:
        return ok(self.invoke_function("validate-seo", dict(payload)))

    @service_call("Error sending blog analytics event")
    def send_blog_analytics_event(self, event: Mapping[str, Any]) -> Envelope:
        self.invoke_function("process-analytics", dict(event))
        return ok()

    # --- Drafts ------------------------------------------------------------
    def save_blog_draft(self, payload: Mapping[str, Any]) -> Envelope:
        if not self.is_configured:
            logger.info("save_blog_draft: database not configured, returning simulated success")
            return ok({"id": "local-draft", **dict(payload), "status": BlogArticleStatusEnum.DRAFT.value})
        return self._save_blog_draft(payload)

    @service_call("Error saving blog draft")
    def _save_blog_draft(self, payload: Mapping[str, Any]) -> Envelope:
        user = self.get_user()
        if user is not None:
            self.ensure_user_profile(user)

        now = utcnow()
        title = payload.get("meta_title") or "Sans titre"
        content = payload.get("content") or ""
        article = BlogArticle(
            title=title,
            slug=slug_from_canonical(payload.get("canonical_url")) or slugify(title) or None,
            excerpt=payload.get("meta_description") or None,
            content=content,
            markdown_content=content,
            cover_image_url=payload.get("cover_image_url") or None,
            category_id=_optional_uuid(payload.get("category_id"), "category ID"),
            status=BlogArticleStatusEnum.DRAFT.value,
            meta_title=payload.get("meta_title") or None,
            meta_description=payload.get("meta_description") or None,
            canonical_url=payload.get("canonical_url") or None,
            author_id=user.id if user else None,
            created_at=now,
            updated_at=now,
        )

        logger.debug("Inserting draft into blog_articles")
        self.db.add(article)
        self.db.commit()
        self.db.refresh(article)
        logger.debug("Draft insert success id=%s", article.id)
        record_status_change(BlogArticleStatusEnum.DRAFT.value)
        return ok(article.as_dict())

    def upsert_blog_draft(self, article_id: Any, payload: Mapping[str, Any]) -> Envelope:
        """Update only the provided fields of draft ``article_id``, or insert a new draft."""
        if not self.is_configured:
            return ok(
                {
                    "id": article_id or "local-draft",
                    "status": BlogArticleStatusEnum.DRAFT.value,
                    **dict(payload),
                    "updated_at": utcnow().isoformat(),
                }
            )
        return self._upsert_blog_draft(article_id, payload)

    @service_call("Error upserting blog draft")
    def _upsert_blog_draft(self, article_id: Any, payload: Mapping[str, Any]) -> Envelope:
        tag_ids = payload.get("tag_ids")

        if not article_id:
            inserted = self.save_blog_draft(payload)
            if not inserted["success"]:
                return inserted
            if isinstance(tag_ids, list):
                self.set_article_tags(inserted["data"]["id"], tag_ids)
            return inserted

        article = self.db.get(BlogArticle, as_uuid(article_id, "article ID"))
        if article is None:
            raise LookupError("Article not found")

        if "content" in payload:
            article.content = payload["content"]
            article.markdown_content = payload["content"]
        for name in _METADATA_FIELDS:
            if name in payload:
                value = payload[name] or None
                if name == "category_id":
                    value = _optional_uuid(value, "category ID")
                setattr(article, name, value)
        article.status = BlogArticleStatusEnum.DRAFT.value
        article.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(article)
        data = article.as_dict()

        if isinstance(tag_ids, list):
            self.set_article_tags(data["id"], tag_ids)
        return ok(data)

    @service_call("Error fetching blog article by id")
    def get_blog_article_by_id(self, article_id: Any) -> Envelope:
        if not article_id:
            raise ValueError("Article ID is required")
        if not self.is_configured:
            return ok(
                {
                    "id": article_id,
                    "title": "Brouillon",
                    "slug": "brouillon",
                    "status": BlogArticleStatusEnum.DRAFT.value,
                    "content": "# Draft",
                    "markdown_content": "# Draft",
                    "meta_title": "Brouillon",
                    "meta_description": "Extrait",
                    "category_id": None,
                    "cover_image_url": None,
                    "tags": [],
                }
            )
        article = self.db.get(BlogArticle, as_uuid(article_id, "article ID"))
        if article is None:
            raise LookupError("Article not found")
        return ok(article.as_dict())

    # --- Taxonomy ----------------------------------------------------------
    @service_call("Error fetching blog categories")
    def get_blog_categories(self) -> Envelope:
        if not self.is_configured:
            return ok([])
        rows = self.db.scalars(
            select(BlogCategory).where(BlogCategory.is_active.is_(True)).order_by(BlogCategory.name)
        ).all()
        return ok([row.as_dict() for row in rows])

    @service_call("Error fetching blog tags")
    def get_blog_tags(self) -> Envelope:
        if not self.is_configured:
            return ok([])
        rows = self.db.scalars(select(BlogTag).order_by(BlogTag.name)).all()
        return ok([row.as_dict() for row in rows])

    @service_call("Error setting article tags")
    def set_article_tags(self, article_id: Any, tag_ids: Any) -> Envelope:
        if not article_id or not isinstance(tag_ids, list):
            return ok()
        if not self.is_configured:
            return ok()

        article_uuid = as_uuid(article_id, "article ID")
        self.db.execute(delete(BlogArticleTag).where(BlogArticleTag.article_id == article_uuid))
        unique_tags = list(dict.fromkeys(as_uuid(tag_id, "tag ID") for tag_id in tag_ids if tag_id))
        self.db.add_all(BlogArticleTag(article_id=article_uuid, tag_id=tag_id) for tag_id in unique_tags)
        self.db.commit()
        return ok()

    @service_call("Error fetching article tag ids")
    def get_article_tag_ids(self, article_id: Any) -> Envelope:
        if not article_id or not self.is_configured:
            return ok([])
        tag_ids = self.db.scalars(
            select(BlogArticleTag.tag_id).where(BlogArticleTag.article_id == as_uuid(article_id, "article ID"))
        ).all()
        return ok([str(tag_id) for tag_id in tag_ids if tag_id])

    # --- Lifecycle ---------------------------------------------------------
    def _set_status(self, article_id: Any, status: BlogArticleStatusEnum, **changes: Any) -> Envelope:
        article = self.db.get(BlogArticle, as_uuid(article_id, "article ID"))
        if article is None:
            raise LookupError("Article not found")

        for name, value in changes.items():
            setattr(article, name, value)
        article.status = status.value
        article.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(article)
        record_status_change(status.value)
        logger.info("blog_article_status id=%s status=%s", article.id, status.value)
        return ok(article.as_dict())

    @staticmethod
    def _metadata(payload: Mapping[str, Any] | None, *, blank_to_none: bool) -> dict[str, Any]:
        payload = payload or {}
        values: dict[str, Any] = {}
        for name in _METADATA_FIELDS:
            value = payload.get(name)
            if blank_to_none and not value:
                value = None
            if name == "category_id":
                value = _optional_uuid(value, "category ID")
            values[name] = value
        return values

    @service_call("Error marking article ready")
    def mark_article_ready(self, article_id: Any, payload: Mapping[str, Any] | None = None) -> Envelope:
        if not self.is_configured:
            return ok(
                {
                    "id": article_id or "local-draft",
                    "status": BlogArticleStatusEnum.READY.value,
                    "updated_at": utcnow().isoformat(),
                }
            )
        return self._set_status(article_id, BlogArticleStatusEnum.READY, **self._metadata(payload, blank_to_none=False))

    @service_call("Error scheduling article")
    def schedule_article(self, article_id: Any, payload: Mapping[str, Any] | None = None) -> Envelope:
        scheduled_at = parse_datetime((payload or {}).get("scheduled_at")) or utcnow()
        if not self.is_configured:
            return ok(
                {
                    "id": article_id or "local",
                    "status": BlogArticleStatusEnum.SCHEDULED.value,
                    "scheduled_at": scheduled_at.isoformat(),
                }
            )
        return self._set_status(article_id, BlogArticleStatusEnum.SCHEDULED, scheduled_at=scheduled_at)

    @service_call("Error publishing article")
    def publish_article(self, article_id: Any, payload: Mapping[str, Any] | None = None) -> Envelope:
        if not self.is_configured:
            return ok()
        return self._set_status(
            article_id,
            BlogArticleStatusEnum.PUBLISHED,
            published_at=utcnow(),
            **self._metadata(payload, blank_to_none=True),
        )

    @service_call("Error archiving article")
    def archive_article(self, article_id: Any) -> Envelope:
        if not self.is_configured:
            return ok({"id": article_id or "local", "status": BlogArticleStatusEnum.ARCHIVED.value})
        return self._set_status(article_id, BlogArticleStatusEnum.ARCHIVED, archived_at=utcnow())

    # --- Listing -----------------------------------------------------------
    @service_call("Error listing blog articles")
    def list_blog_articles(self, params: Mapping[str, Any] | None = None) -> Envelope:
        params = params or {}
        status = params.get("status") or "all"
        page = max(1, _positive_int(params.get("page"), 1))
        page_size = max(1, min(MAX_PAGE_SIZE, _positive_int(params.get("pageSize"), DEFAULT_PAGE_SIZE)))
        search = str(params.get("search") or "").strip()
        offset = (page - 1) * page_size

        if not self.is_configured:
            filtered = simulated_articles()
            if status != "all":
                filtered = [article for article in filtered if article["status"] == status]
            if search:
                filtered = [article for article in filtered if search.lower() in article["title"].lower()]
            items = filtered[offset : offset + page_size]
            return ok({"items": items, "total": len(filtered), "page": page, "pageSize": page_size})

        query = select(BlogArticle)
        if status != "all":
            query = query.where(BlogArticle.status == status)
        if search:
            query = query.where(BlogArticle.title.ilike(f"%{search}%"))

        total = self.db.scalar(select(func.count()).select_from(query.subquery())) or 0
        rows = self.db.scalars(
            query.order_by(BlogArticle.updated_at.desc()).offset(offset).limit(page_size)
        ).all()
        return ok(
            {
                "items": [row.as_dict(*LIST_COLUMNS) for row in rows],
                "total": total,
                "page": page,
                "pageSize": page_size,
            }
        )
