"""Server-side callable functions.

These are the stored procedures and edge functions the portal relies on:
quota-limited downloads, dual-table comment deletion, AI blog drafting,
SEO validation and analytics ingestion. The service layer calls them
through :func:`invoke`; the HTTP API exposes the same registry under
``/functions/{name}``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..config import settings
from ..models import (
    BlogAnalyticsEvent,
    BlogSeoAudit,
    Comment,
    CompanyContext,
    DeletedComment,
    Document,
    Download,
    Profile,
)
from .auth import AuthUser
from .base import ServiceError, as_uuid, utcnow
from .content_generation import generate_blog_draft
from .metrics import record_analytics_event, record_download, record_seo_validation
from .seo import validate_seo
from .storage import StorageService, get_storage_service

logger = logging.getLogger(__name__)


class FunctionError(ServiceError):
    """A callable function refused the request; ``payload`` is its JSON body."""

    def __init__(self, status: int, payload: Mapping[str, Any]) -> None:
        self.status = status
        self.payload = dict(payload)
        if status in (401, 403):
            self.code = self.payload.get("error")
        super().__init__(self.payload.get("message") or self.payload.get("error") or f"Function failed ({status})")


@dataclass
class FunctionContext:
    session: Optional[Session]
    user: Optional[AuthUser]
    storage_factory: Callable[[], StorageService] = field(default=get_storage_service)

    @property
    def db(self) -> Session:
        if self.session is None:
            raise FunctionError(503, {"error": "backend_not_configured", "message": "Database is not configured"})
        return self.session

    def require_user(self) -> AuthUser:
        if self.user is None:
            raise FunctionError(401, {"error": "not_authenticated", "message": "Authentication required"})
        return self.user


Handler = Callable[[FunctionContext, Dict[str, Any]], Any]
_REGISTRY: Dict[str, Handler] = {}


def register(name: str) -> Callable[[Handler], Handler]:
    def decorator(handler: Handler) -> Handler:
        _REGISTRY[name] = handler
        return handler

    return decorator


def available_functions() -> list[str]:
    return sorted(_REGISTRY)


def invoke(
    name: str,
    body: Mapping[str, Any] | None = None,
    *,
    session: Optional[Session] = None,
    user: Optional[AuthUser] = None,
    storage_factory: Callable[[], StorageService] | None = None,
) -> Any:
    handler = _REGISTRY.get(name)
    if handler is None:
        raise FunctionError(404, {"error": "function_not_found", "message": f"Unknown function {name}"})

    context = FunctionContext(session=session, user=user)
    if storage_factory is not None:
        context.storage_factory = storage_factory
    return handler(context, dict(body or {}))


def _required(body: Mapping[str, Any], key: str) -> Any:
    value = body.get(key)
    if not value:
        raise FunctionError(400, {"error": "invalid_request", "message": f"{key} is required"})
    return value


# --- Comments ---------------------------------------------------------------
@register("delete_comment_dual_table")
def delete_comment_dual_table(ctx: FunctionContext, body: Dict[str, Any]) -> dict[str, Any]:
    user = ctx.require_user()
    db = ctx.db
    comment = db.get(Comment, as_uuid(_required(body, "comment_id"), "comment ID"))
    if comment is None:
        return {"success": False, "error": "Comment not found"}
    if comment.user_id != user.id:
        return {"success": False, "error": "You can only delete your own comments"}

    db.add(
        DeletedComment(
            id=comment.id,
            document_id=comment.document_id,
            user_id=comment.user_id,
            content=comment.content,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            deleted_at=utcnow(),
            deleted_by=user.id,
        )
    )
    db.delete(comment)
    db.commit()
    logger.info("comment_deleted comment_id=%s user_id=%s", comment.id, user.id)
    return {"success": True}


@register("restore_comment_from_deleted")
def restore_comment_from_deleted(ctx: FunctionContext, body: Dict[str, Any]) -> dict[str, Any]:
    user = ctx.require_user()
    db = ctx.db
    deleted = db.get(DeletedComment, as_uuid(_required(body, "comment_id"), "comment ID"))
    if deleted is None:
        return {"success": False, "error": "Deleted comment not found"}
    if deleted.user_id != user.id:
        return {"success": False, "error": "You can only restore your own comments"}

    db.add(
        Comment(
            id=deleted.id,
            document_id=deleted.document_id,
            user_id=deleted.user_id,
            content=deleted.content,
            created_at=deleted.created_at,
            updated_at=utcnow(),
        )
    )
    db.delete(deleted)
    db.commit()
    logger.info("comment_restored comment_id=%s user_id=%s", deleted.id, user.id)
    return {"success": True}


# --- Downloads ---------------------------------------------------------------
def allowed_downloads_for(db: Session, user_id: Any) -> int:
    profile = db.get(Profile, as_uuid(user_id, "user ID"))
    bonus = (profile.download_bonus or 0) if profile is not None else 0
    return settings.free_download_limit + max(0, bonus)


def count_user_downloads(db: Session, user_id: Any) -> int:
    return db.scalar(
        select(func.count()).select_from(Download).where(Download.user_id == as_uuid(user_id, "user ID"))
    ) or 0


@register("get_allowed_downloads")
def get_allowed_downloads(ctx: FunctionContext, body: Dict[str, Any]) -> int:
    user = ctx.require_user()
    user_id = as_uuid(_required(body, "p_user_id"), "user ID")
    if user_id != user.id:
        raise FunctionError(403, {"error": "forbidden", "message": "You can only read your own download quota"})
    return allowed_downloads_for(ctx.db, user_id)


@register("download_with_limit")
def download_with_limit(ctx: FunctionContext, body: Dict[str, Any]) -> dict[str, Any]:
    user = ctx.require_user()
    db = ctx.db
    document = db.get(Document, as_uuid(_required(body, "documentId"), "document ID"))
    if document is None:
        raise FunctionError(404, {"error": "document_not_found", "message": "Document introuvable."})
    if not document.storage_key:
        raise FunctionError(409, {"error": "document_unavailable", "message": "Aucun fichier pour ce document."})

    used = count_user_downloads(db, user.id)
    allowed = allowed_downloads_for(db, user.id)
    if used >= allowed:
        record_download("limited")
        logger.info("download_limit_reached user_id=%s used=%s allowed=%s", user.id, used, allowed)
        raise FunctionError(403, {"error": "download_limit_reached", "used": used, "allowed": allowed})

    signed_url = ctx.storage_factory().generate_presigned_url(document.storage_key)

    db.add(Download(document_id=document.id, user_id=user.id, type=body.get("type") or "pdf"))
    db.commit()
    record_download("granted")
    logger.info("download_granted user_id=%s document_id=%s used=%s", user.id, document.id, used + 1)
    return {"signedUrl": signed_url, "used": used + 1, "allowed": allowed}


# --- Blog --------------------------------------------------------------------
def _active_context(db: Optional[Session]) -> dict[str, Any] | None:
    if db is None:
        return None
    row = db.scalars(
        select(CompanyContext)
        .where(CompanyContext.is_active.is_(True))
        .order_by(CompanyContext.updated_at.desc())
        .limit(1)
    ).first()
    return row.as_dict() if row else None


@register("generate-blog-content")
def generate_blog_content(ctx: FunctionContext, body: Dict[str, Any]) -> dict[str, Any]:
    if not (body.get("topic") or body.get("title")):
        raise FunctionError(400, {"error": "invalid_request", "message": "topic is required"})

    try:
        draft = generate_blog_draft(body, _active_context(ctx.session))
    except Exception as exc:
        logger.error("Blog generation failed: %s", exc)
        raise FunctionError(502, {"error": "generation_failed", "message": str(exc)}) from exc
    return draft.model_dump()


@register("validate-seo")
def validate_seo_function(ctx: FunctionContext, body: Dict[str, Any]) -> dict[str, Any]:
    report = validate_seo(body)
    record_seo_validation(report.score)
    result = report.as_dict()
    result["persisted"] = False

    if body.get("persist") and ctx.session is not None and ctx.user is not None:
        article_id = body.get("article_id")
        audit = BlogSeoAudit(
            article_id=as_uuid(article_id, "article ID") if article_id else None,
            score=report.score,
            report=report.as_dict(),
            created_by=ctx.user.id,
        )
        ctx.session.add(audit)
        ctx.session.commit()
        result["persisted"] = True
        result["audit_id"] = str(audit.id)
    return result


@register("process-analytics")
def process_analytics(ctx: FunctionContext, body: Dict[str, Any]) -> dict[str, Any]:
    user = ctx.require_user()
    event_type = _required(body, "event_type")
    article_id = body.get("article_id")
    value = body.get("value")

    event = BlogAnalyticsEvent(
        article_id=as_uuid(article_id, "article ID") if article_id else None,
        user_id=user.id,
        event_type=str(event_type),
        value=int(value) if isinstance(value, (int, float)) else None,
        data={key: val for key, val in body.items() if key not in {"event_type", "article_id", "value"}},
    )
    ctx.db.add(event)
    ctx.db.commit()
    record_analytics_event(str(event_type))
    return {"recorded": True, "id": str(event.id)}
