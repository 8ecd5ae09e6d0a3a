from __future__ import annotations

import enum
import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from .base import Base, JSONType, UUIDType


class BlogArticleStatusEnum(str, enum.Enum):
    DRAFT = "draft"
    READY = "ready"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"
    ARCHIVED = "archived"


_STATUS_VALUES = ", ".join(f"'{status.value}'" for status in BlogArticleStatusEnum)


class BlogCategory(Base):
    __tablename__ = "blog_categories"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    color = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class BlogTag(Base):
    __tablename__ = "blog_tags"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class BlogArticle(Base):
    __tablename__ = "blog_articles"
    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="ck_blog_articles_status"),
    )

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=True, index=True)
    excerpt = Column(Text, nullable=True)
    content = Column(Text, nullable=False, default="")
    markdown_content = Column(Text, nullable=False, default="")
    status = Column(String(20), nullable=False, default=BlogArticleStatusEnum.DRAFT.value, index=True)
    category_id = Column(UUIDType, ForeignKey("blog_categories.id", ondelete="SET NULL"), nullable=True)
    cover_image_url = Column(String, nullable=True)
    meta_title = Column(String, nullable=True)
    meta_description = Column(Text, nullable=True)
    canonical_url = Column(String, nullable=True)
    author_id = Column(UUIDType, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    scheduled_at = Column(DateTime(timezone=True), nullable=True, index=True)
    published_at = Column(DateTime(timezone=True), nullable=True)
    archived_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class BlogArticleTag(Base):
    __tablename__ = "blog_article_tags"

    article_id = Column(UUIDType, ForeignKey("blog_articles.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(UUIDType, ForeignKey("blog_tags.id", ondelete="CASCADE"), primary_key=True)


class BlogSeoAudit(Base):
    __tablename__ = "blog_seo_audits"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    article_id = Column(UUIDType, ForeignKey("blog_articles.id", ondelete="CASCADE"), nullable=True, index=True)
    score = Column(Float, nullable=False)
    report = Column(JSONType, nullable=False, default=dict)
    created_by = Column(UUIDType, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class BlogAnalyticsEvent(Base):
    __tablename__ = "blog_analytics_events"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    article_id = Column(UUIDType, ForeignKey("blog_articles.id", ondelete="CASCADE"), nullable=True, index=True)
    user_id = Column(UUIDType, nullable=False)
    event_type = Column(String, nullable=False)
    value = Column(Integer, nullable=True)
    data = Column(JSONType, nullable=False, default=dict)
    at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
