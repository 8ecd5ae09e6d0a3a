from __future__ import annotations

import os
import pathlib
import sys
import uuid
from typing import Callable, Iterator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

ROOT_DIR = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# Tests run against their own SQLite engine, never a real DATABASE_URL.
os.environ["DATABASE_URL"] = ""

from mwplu.dependencies.db import get_db
from mwplu.main import app
from mwplu.models import City, Document, Zone, Zoning
from mwplu.models.base import Base
from mwplu.services.auth import AuthService, AuthUser
from mwplu.services.db_service import DbService


@pytest.fixture()
def engine():
    """In-memory SQLite shared by every session of one test."""
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db_session(session_factory) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def user() -> AuthUser:
    return AuthUser(id=uuid.uuid4(), email="owner@example.com", user_metadata={"full_name": "Camille Owner"})


@pytest.fixture()
def other_user() -> AuthUser:
    return AuthUser(id=uuid.uuid4(), email="other@example.com")


@pytest.fixture()
def make_service(db_session) -> Callable[..., DbService]:
    def _make(user: Optional[AuthUser] = None, storage_factory=None, session=db_session) -> DbService:
        return DbService(session, user, storage_factory=storage_factory)

    return _make


@pytest.fixture()
def catalogue(db_session) -> dict[str, object]:
    """One city, zoning, zone and downloadable PLU document."""
    city = City(name="Grenoble", insee_code="38185")
    db_session.add(city)
    db_session.flush()
    zoning = Zoning(city_id=city.id, name="PLUi Grenoble")
    db_session.add(zoning)
    db_session.flush()
    zone = Zone(zoning_id=zoning.id, name="UA")
    db_session.add(zone)
    db_session.flush()
    document = Document(
        city_id=city.id,
        zoning_id=zoning.id,
        zone_id=zone.id,
        title="Synthèse zone UA",
        content="Hauteur maximale 15 mètres",
        storage_key="documents/grenoble/ua.pdf",
    )
    db_session.add(document)
    db_session.commit()
    return {"city": city, "zoning": zoning, "zone": zone, "document": document}


@pytest.fixture()
def client(session_factory) -> Iterator[TestClient]:
    """TestClient whose requests share the test's SQLite engine."""

    def _get_db() -> Iterator[Session]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        with TestClient(app) as _client:
            yield _client
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture()
def unconfigured_client() -> Iterator[TestClient]:
    """TestClient with no database behind it."""

    def _get_db() -> Iterator[None]:
        yield None

    app.dependency_overrides[get_db] = _get_db
    try:
        with TestClient(app) as _client:
            yield _client
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture()
def auth_headers(user: AuthUser) -> dict[str, str]:
    return {"Authorization": f"Bearer {AuthService().issue_token(user)}"}


@pytest.fixture()
def mock_s3_bucket():
    from moto import mock_aws

    import boto3

    from mwplu.config import settings

    with mock_aws():
        s3 = boto3.client("s3", region_name=settings.aws.region)
        bucket = "test-documents-bucket"
        s3.create_bucket(
            Bucket=bucket,
            CreateBucketConfiguration={"LocationConstraint": settings.aws.region},
        )
        previous_bucket = settings.aws.s3_bucket
        settings.aws.s3_bucket = bucket
        try:
            yield s3
        finally:
            settings.aws.s3_bucket = previous_bucket
