from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base, JSONType, UUIDType


class City(Base):
    __tablename__ = "cities"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, index=True)
    insee_code = Column(String, nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Zoning(Base):
    __tablename__ = "zonings"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    city_id = Column(UUIDType, ForeignKey("cities.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    city = relationship("City", lazy="joined")


class Zone(Base):
    __tablename__ = "zones"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    zoning_id = Column(UUIDType, ForeignKey("zonings.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Typology(Base):
    __tablename__ = "typologies"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)


class Document(Base):
    """A PLU synthesis for one zone of one zoning."""

    __tablename__ = "documents"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4)
    city_id = Column(UUIDType, ForeignKey("cities.id", ondelete="SET NULL"), nullable=True, index=True)
    zoning_id = Column(UUIDType, ForeignKey("zonings.id", ondelete="CASCADE"), nullable=False, index=True)
    zone_id = Column(UUIDType, ForeignKey("zones.id", ondelete="CASCADE"), nullable=False, index=True)
    typology_id = Column(UUIDType, ForeignKey("typologies.id", ondelete="SET NULL"), nullable=True)
    title = Column(String, nullable=True)
    content = Column(Text, nullable=True)
    html_content = Column(Text, nullable=True)
    content_json = Column(JSONType, nullable=True)
    storage_key = Column(String, nullable=True)  # object key of the downloadable PDF
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    city = relationship("City", lazy="joined")
    zoning = relationship("Zoning", lazy="joined")
    zone = relationship("Zone", lazy="joined")
