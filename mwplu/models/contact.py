from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.sql import func

from .base import Base, UUIDType


class ContactMessage(Base):
    __tablename__ = "contact_messages"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class ResearchHistory(Base):
    __tablename__ = "research_history"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    user_id = Column(UUIDType, nullable=True, index=True)
    city_id = Column(UUIDType, ForeignKey("cities.id", ondelete="SET NULL"), nullable=True)
    address_input = Column(String, nullable=True)
    geo_lon = Column(Float, nullable=True)
    geo_lat = Column(Float, nullable=True)
    zone_label = Column(String, nullable=True)
    success = Column(Boolean, nullable=False, default=False)
    reason = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
