from __future__ import annotations

from datetime import timedelta
from urllib.parse import parse_qs, urlparse

from mwplu.db import session as db_session_module
from mwplu.services.storage import StorageService


def test_presigned_url_targets_bucket_key(mock_s3_bucket) -> None:
    url = StorageService().generate_presigned_url("documents/grenoble/ua.pdf", ttl=timedelta(minutes=2))

    parsed = urlparse(url)
    assert parsed.scheme == "https"
    assert parsed.path.endswith("documents/grenoble/ua.pdf")
    assert parse_qs(parsed.query)["X-Amz-Expires"] == ["120"]


def test_storage_and_session_surface() -> None:
    # documents are only ever read back through signed URLs
    assert not hasattr(StorageService, "upload_bytes")
    assert not hasattr(db_session_module, "get_engine")
    assert db_session_module.is_configured() is False
