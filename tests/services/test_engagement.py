from __future__ import annotations

from urllib.parse import urlparse

import pytest

from mwplu.models import Comment, DeletedComment, Download, Profile, Rating
from mwplu.services.storage import get_storage_service


# --- Comments ---------------------------------------------------------------
def test_add_comment_requires_user(catalogue, make_service) -> None:
    result = make_service().add_comment(catalogue["document"].id, "Bonjour")

    assert result == {"success": False, "error": "User must be authenticated", "code": "not_authenticated"}


def test_add_comment_rejects_blank(catalogue, make_service, user) -> None:
    result = make_service(user).add_comment(catalogue["document"].id, "   ")

    assert result == {"success": False, "error": "Comment content is required"}


def test_delete_and_restore_comment(catalogue, db_session, make_service, user) -> None:
    service = make_service(user)
    document_id = catalogue["document"].id
    comment = service.add_comment(document_id, "  Très utile  ")["data"]
    assert comment["content"] == "Très utile"

    assert service.delete_comment(comment["id"]) == {"success": True, "data": None}
    assert service.get_comments(document_id)["data"] == []
    deleted = db_session.query(DeletedComment).one()
    assert str(deleted.id) == comment["id"]
    assert deleted.deleted_by == user.id

    assert service.restore_comment(comment["id"])["success"] is True
    restored = service.get_comments(document_id)["data"]
    assert [row["id"] for row in restored] == [comment["id"]]
    assert db_session.query(DeletedComment).count() == 0


def test_only_author_may_delete(catalogue, db_session, make_service, user, other_user) -> None:
    comment = make_service(user).add_comment(catalogue["document"].id, "À moi")["data"]

    result = make_service(other_user).delete_comment(comment["id"])

    assert result == {"success": False, "error": "You can only delete your own comments"}
    assert db_session.query(Comment).count() == 1


def test_restore_unknown_comment(catalogue, make_service, user) -> None:
    comment = make_service(user).add_comment(catalogue["document"].id, "Présent")["data"]

    result = make_service(user).restore_comment(comment["id"])

    assert result == {"success": False, "error": "Deleted comment not found"}


# --- Ratings ----------------------------------------------------------------
def test_rating_upsert_keeps_one_row(catalogue, db_session, make_service, user) -> None:
    service = make_service(user)
    document_id = catalogue["document"].id

    first = service.submit_rating(document_id, 2)["data"]
    second = service.submit_rating(document_id, 5)["data"]

    assert first["id"] == second["id"]
    assert second["rating"] == 5
    assert db_session.query(Rating).count() == 1
    assert service.get_user_rating(document_id)["data"]["rating"] == 5


def test_rating_average(catalogue, make_service, user, other_user) -> None:
    document_id = catalogue["document"].id
    make_service(user).submit_rating(document_id, 4)
    make_service(other_user).submit_rating(document_id, 5)

    data = make_service().get_ratings(document_id)["data"]

    assert data["average"] == "4.5"
    assert data["count"] == 2


def test_rating_average_empty(catalogue, make_service) -> None:
    data = make_service().get_ratings(catalogue["document"].id)["data"]

    assert data == {"ratings": [], "average": None, "count": 0}


@pytest.mark.parametrize("value", [0, 6, 3.5, "4", True])
def test_rating_rejects_invalid_values(catalogue, make_service, user, value) -> None:
    result = make_service(user).submit_rating(catalogue["document"].id, value)

    assert result == {"success": False, "error": "Rating must be an integer between 1 and 5"}


def test_delete_rating(catalogue, db_session, make_service, user) -> None:
    service = make_service(user)
    service.submit_rating(catalogue["document"].id, 3)

    assert service.delete_rating(catalogue["document"].id)["success"] is True
    assert db_session.query(Rating).count() == 0
    assert service.get_user_rating(catalogue["document"].id)["data"] is None


def test_user_rating_anonymous(catalogue, make_service) -> None:
    assert make_service().get_user_rating(catalogue["document"].id) == {"success": True, "data": None}


# --- Downloads --------------------------------------------------------------
def test_track_download(catalogue, db_session, make_service, user) -> None:
    assert make_service().track_download(catalogue["document"].id) == {"success": True, "data": None}

    tracked = make_service(user).track_download(catalogue["document"].id, "docx")["data"]

    assert tracked["type"] == "docx"
    assert make_service().get_download_stats(catalogue["document"].id)["data"] == {"count": 1}


def test_download_count_anonymous(make_service) -> None:
    assert make_service().get_user_download_count() == {"success": True, "used": 0, "remaining": 5, "allowed": 5}


def test_limited_download_requires_login(catalogue, make_service) -> None:
    result = make_service().request_limited_download(catalogue["document"].id)

    assert result["success"] is False
    assert result["code"] == "not_authenticated"


def test_limited_download_quota(catalogue, db_session, make_service, user, mock_s3_bucket) -> None:
    service = make_service(user, storage_factory=get_storage_service)
    document_id = catalogue["document"].id

    for attempt in range(1, 6):
        result = service.request_limited_download(document_id)
        assert result["success"] is True
        assert result["used"] == attempt
        assert result["allowed"] == 5
        url = urlparse(result["url"])
        assert url.path.endswith("documents/grenoble/ua.pdf")
        assert "X-Amz-Signature" in url.query

    sixth = service.request_limited_download(document_id)

    assert sixth == {"success": False, "error": "Limite de téléchargements atteinte.", "code": "download_limit_reached"}
    assert db_session.query(Download).count() == 5
    assert service.get_user_download_count() == {"success": True, "used": 5, "remaining": 0, "allowed": 5}


def test_download_bonus_raises_quota(catalogue, db_session, make_service, user, mock_s3_bucket) -> None:
    db_session.add(Profile(id=user.id, email=user.email, download_bonus=2))
    db_session.commit()
    service = make_service(user, storage_factory=get_storage_service)

    results = [service.request_limited_download(catalogue["document"].id) for _ in range(8)]

    assert [result["success"] for result in results] == [True] * 7 + [False]
    assert results[6]["allowed"] == 7


def test_limited_download_without_file(catalogue, db_session, make_service, user) -> None:
    catalogue["document"].storage_key = None
    db_session.commit()

    result = make_service(user).request_limited_download(catalogue["document"].id)

    assert result == {"success": False, "error": "Aucun fichier pour ce document."}
    assert db_session.query(Download).count() == 0
