from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete, func, select

from ..config import settings
from ..db.upsert import upsert
from ..models import Comment, Download, Rating
from .base import NOT_AUTHENTICATED_CODE, Envelope, ServiceBase, as_uuid, fail, ok, service_call, utcnow
from .functions import FunctionError, count_user_downloads

logger = logging.getLogger(__name__)

DOWNLOAD_LIMIT_CODE = "download_limit_reached"

class EngagementService(ServiceBase):
    """Comments, ratings and downloads attached to a document."""

    # --- Comments ----------------------------------------------------------
    @service_call("Error fetching comments")
    def get_comments(self, document_id: Any) -> Envelope:
        rows = self.db.scalars(
            select(Comment)
            .where(Comment.document_id == as_uuid(document_id, "document ID"))
            .order_by(Comment.created_at.desc())
        ).all()
        return ok([row.as_dict() for row in rows])

    @service_call("Error adding comment")
    def add_comment(self, document_id: Any, content: str) -> Envelope:
        user = self.require_user()
        text = (content or "").strip()
        if not text:
            raise ValueError("Comment content is required")

        comment = Comment(document_id=as_uuid(document_id, "document ID"), user_id=user.id, content=text)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return ok(comment.as_dict())

    @service_call("Error deleting comment")
    def delete_comment(self, comment_id: Any) -> Envelope:
        logger.info("Attempting to delete comment with ID: %s", comment_id)
        data = self.invoke_function("delete_comment_dual_table", {"comment_id": comment_id})
        if isinstance(data, dict) and data.get("success") is False:
            raise RuntimeError(data.get("error") or "Unknown error from delete function")
        return ok()

    @service_call("Error restoring comment")
    def restore_comment(self, comment_id: Any) -> Envelope:
        logger.info("Attempting to restore comment with ID: %s", comment_id)
        data = self.invoke_function("restore_comment_from_deleted", {"comment_id": comment_id})
        if isinstance(data, dict) and data.get("success") is False:
            raise RuntimeError(data.get("error") or "Unknown error from restore function")
        return ok()

    # --- Ratings -----------------------------------------------------------
    @service_call("Error fetching ratings")
    def get_ratings(self, document_id: Any) -> Envelope:
        rows = self.db.scalars(
            select(Rating).where(Rating.document_id == as_uuid(document_id, "document ID"))
        ).all()
        count = len(rows)
        average = f"{sum(row.rating for row in rows) / count:.1f}" if count else None
        return ok({"ratings": [row.as_dict() for row in rows], "average": average, "count": count})

    @service_call("Error fetching user rating")
    def get_user_rating(self, document_id: Any) -> Envelope:
        user = self.get_user()
        if user is None:
            return ok(None)
        row = self.db.scalars(
            select(Rating).where(
                Rating.document_id == as_uuid(document_id, "document ID"),
                Rating.user_id == user.id,
            )
        ).one_or_none()
        return ok(row.as_dict() if row else None)

    @service_call("Error submitting rating")
    def submit_rating(self, document_id: Any, rating: Any) -> Envelope:
        user = self.require_user()
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValueError("Rating must be an integer between 1 and 5")

        (row,) = upsert(
            self.db,
            Rating,
            {
                "document_id": as_uuid(document_id, "document ID"),
                "user_id": user.id,
                "rating": rating,
                "updated_at": utcnow(),
            },
            conflict_columns=("document_id", "user_id"),
        )
        data = row.as_dict()
        self.db.commit()
        return ok(data)

    @service_call("Error deleting rating")
    def delete_rating(self, document_id: Any) -> Envelope:
        user = self.require_user()
        self.db.execute(
            delete(Rating).where(
                Rating.document_id == as_uuid(document_id, "document ID"),
                Rating.user_id == user.id,
            )
        )
        self.db.commit()
        return ok()

    # --- Downloads ---------------------------------------------------------
    @service_call("Error tracking download")
    def track_download(self, document_id: Any, download_type: str = "pdf") -> Envelope:
        user = self.get_user()
        if user is None:
            logger.warning("Download tracking skipped: User not authenticated")
            return ok()

        download = Download(document_id=as_uuid(document_id, "document ID"), user_id=user.id, type=download_type)
        self.db.add(download)
        self.db.commit()
        self.db.refresh(download)
        return ok(download.as_dict())

    def request_limited_download(self, document_id: Any) -> Envelope:
        """Ask ``download_with_limit`` for a signed URL; the quota is enforced there."""
        try:
            if not document_id:
                raise ValueError("Document ID is required")

            if self.get_user() is None:
                return fail("Vous devez être connecté pour télécharger.", code=NOT_AUTHENTICATED_CODE)

            try:
                data = self.invoke_function("download_with_limit", {"documentId": str(document_id)})
            except FunctionError as exc:
                is_limit = exc.payload.get("error") == DOWNLOAD_LIMIT_CODE or exc.status == 403
                if is_limit:
                    return fail("Limite de téléchargements atteinte.", code=DOWNLOAD_LIMIT_CODE)
                return fail(
                    exc.payload.get("message")
                    or str(exc)
                    or "Erreur lors de la génération du lien de téléchargement."
                )

            if not isinstance(data, dict) or not data.get("signedUrl"):
                return fail("URL de téléchargement non générée.")

            return {"success": True, "url": data["signedUrl"], "used": data.get("used"), "allowed": data.get("allowed")}
        except Exception as exc:
            if self._session is not None:
                self._session.rollback()
            logger.error("Error requesting limited download: %s", exc)
            return fail(str(exc) or "Erreur inconnue.")

    @service_call("Error fetching user download count")
    def get_user_download_count(self) -> Envelope:
        user = self.get_user()
        if user is None:
            limit = settings.free_download_limit
            return ok(used=0, remaining=limit, allowed=limit)

        used = count_user_downloads(self.db, user.id)
        allowed_data = self.invoke_function("get_allowed_downloads", {"p_user_id": str(user.id)})
        allowed = int(allowed_data if allowed_data is not None else settings.free_download_limit)
        return ok(used=used, remaining=max(0, allowed - used), allowed=allowed)

    @service_call("Error fetching download stats")
    def get_download_stats(self, document_id: Any) -> Envelope:
        count = self.db.scalar(
            select(func.count())
            .select_from(Download)
            .where(Download.document_id == as_uuid(document_id, "document ID"))
        )
        return ok({"count": count or 0})
