from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.sql import func

from .base import Base, UUIDType


class Comment(Base):
    __tablename__ = "comments"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    document_id = Column(UUIDType, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUIDType, nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class DeletedComment(Base):
    """Soft-deleted comments, moved here so they can be restored."""

    __tablename__ = "deleted_comments"

    id = Column(UUIDType, primary_key=True)
    document_id = Column(UUIDType, nullable=False, index=True)
    user_id = Column(UUIDType, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    deleted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    deleted_by = Column(UUIDType, nullable=True)


class Rating(Base):
    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("document_id", "user_id", name="uq_ratings_document_user"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_ratings_range"),
    )

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    document_id = Column(UUIDType, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUIDType, nullable=False)
    rating = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class Download(Base):
    __tablename__ = "downloads"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    document_id = Column(UUIDType, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUIDType, nullable=False, index=True)
    type = Column(String, nullable=False, default="pdf")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
