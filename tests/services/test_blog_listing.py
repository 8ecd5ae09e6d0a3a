from __future__ import annotations

from datetime import timedelta

import pytest

from mwplu.models import BlogArticle
from mwplu.services.base import utcnow
from mwplu.services.db_service import DbService


def test_unconfigured_listing_filters_by_status() -> None:
    result = DbService().list_blog_articles({"status": "draft"})

    assert result["success"] is True
    items = result["data"]["items"]
    assert [item["id"] for item in items] == ["draft-1", "draft-2", "draft-3"]
    assert all(item["status"] == "draft" for item in items)
    assert result["data"]["total"] == 3


def test_unconfigured_listing_paginates_and_keeps_total() -> None:
    result = DbService().list_blog_articles({"status": "draft", "page": 2, "pageSize": 2})

    data = result["data"]
    assert [item["id"] for item in data["items"]] == ["draft-3"]
    assert data["total"] == 3
    assert data["page"] == 2
    assert data["pageSize"] == 2


def test_unconfigured_listing_search_and_defaults() -> None:
    result = DbService().list_blog_articles({"search": "publié"})

    data = result["data"]
    assert [item["id"] for item in data["items"]] == ["pub-1"]
    assert data["page"] == 1
    assert data["pageSize"] == 10


def test_page_size_is_clamped() -> None:
    assert DbService().list_blog_articles({"pageSize": 500})["data"]["pageSize"] == 50
    assert DbService().list_blog_articles({"pageSize": -3})["data"]["pageSize"] == 1
    assert DbService().list_blog_articles({"pageSize": "abc"})["data"]["pageSize"] == 10


@pytest.mark.parametrize(("raw", "expected"), [("2.5", 2), (3.9, 3), ("inf", 10), ("nan", 10), ("0.4", 10)])
def test_fractional_page_size_is_truncated(raw, expected) -> None:
    assert DbService().list_blog_articles({"pageSize": raw})["data"]["pageSize"] == expected


def test_listing_from_database_orders_by_update(db_session, make_service) -> None:
    now = utcnow()
    for index in range(7):
        db_session.add(
            BlogArticle(
                title=f"Article {index}",
                status="draft" if index % 2 == 0 else "published",
                updated_at=now - timedelta(minutes=index),
            )
        )
    db_session.commit()

    service = make_service()
    result = service.list_blog_articles({"status": "draft", "pageSize": 3})

    data = result["data"]
    assert data["total"] == 4
    assert [item["title"] for item in data["items"]] == ["Article 0", "Article 2", "Article 4"]
    assert set(data["items"][0]) == {
        "id",
        "title",
        "slug",
        "status",
        "updated_at",
        "meta_title",
        "meta_description",
        "category_id",
        "author_id",
    }

    second = service.list_blog_articles({"status": "draft", "page": 2, "pageSize": 3})["data"]
    assert [item["title"] for item in second["items"]] == ["Article 6"]
    assert second["total"] == 4


def test_listing_search_is_case_insensitive(db_session, make_service) -> None:
    db_session.add_all([BlogArticle(title="Comprendre le PLU"), BlogArticle(title="Zonage et permis")])
    db_session.commit()

    result = make_service().list_blog_articles({"search": "plu"})

    assert [item["title"] for item in result["data"]["items"]] == ["Comprendre le PLU"]
