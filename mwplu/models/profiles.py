from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from .base import Base, UUIDType


class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the authenticated user.
    id = Column(UUIDType, primary_key=True)
    email = Column(String, nullable=True, index=True)
    full_name = Column(String, nullable=True)
    pseudo = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    download_bonus = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
