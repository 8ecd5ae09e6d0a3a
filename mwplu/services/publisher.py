from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import BlogArticle, BlogArticleStatusEnum
from .base import utcnow
from .metrics import record_status_change

logger = logging.getLogger(__name__)


def publish_due_articles(db: Session, now: datetime | None = None) -> list[str]:
    """Publish every scheduled article whose ``scheduled_at`` has passed.

    The caller owns the transaction.
    """
    now = now or utcnow()
    articles = db.scalars(
        select(BlogArticle)
        .where(
            BlogArticle.status == BlogArticleStatusEnum.SCHEDULED.value,
            BlogArticle.scheduled_at.is_not(None),
            BlogArticle.scheduled_at <= now,
        )
        .order_by(BlogArticle.scheduled_at.asc())
    ).all()

    published: list[str] = []
    for article in articles:
        article.status = BlogArticleStatusEnum.PUBLISHED.value
        article.published_at = now
        article.updated_at = now
        record_status_change(BlogArticleStatusEnum.PUBLISHED.value)
        published.append(str(article.id))
        logger.info("scheduled_article_published id=%s scheduled_at=%s", article.id, article.scheduled_at)

    db.flush()
    return published
