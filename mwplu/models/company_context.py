from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Text
from sqlalchemy.sql import func

from .base import Base, JSONType, UUIDType


class CompanyContext(Base):
    __tablename__ = "company_context"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    mission = Column(Text, nullable=True)
    values = Column(JSONType, nullable=False, default=list)
    tone = Column(String, nullable=True)
    messaging = Column(Text, nullable=True)
    brand_voice_guidelines = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=False, index=True)
    created_by = Column(UUIDType, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
