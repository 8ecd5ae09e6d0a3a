from __future__ import annotations

from datetime import datetime, timedelta, timezone

from mwplu.models import BlogArticle, BlogCategory, BlogTag
from mwplu.services.publisher import publish_due_articles
from mwplu.services.taxonomy import SEED_CATEGORIES, SEED_TAGS, seed_blog_taxonomy

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_publishes_only_due_scheduled_articles(db_session) -> None:
    due = BlogArticle(title="Due", status="scheduled", scheduled_at=NOW - timedelta(minutes=5))
    later = BlogArticle(title="Later", status="scheduled", scheduled_at=NOW + timedelta(hours=1))
    draft = BlogArticle(title="Draft", status="draft", scheduled_at=NOW - timedelta(days=1))
    unscheduled = BlogArticle(title="Unscheduled", status="scheduled")
    db_session.add_all([due, later, draft, unscheduled])
    db_session.commit()

    published = publish_due_articles(db_session, now=NOW)
    db_session.commit()

    assert published == [str(due.id)]
    statuses = {row.title: row.status for row in db_session.query(BlogArticle)}
    assert statuses == {"Due": "published", "Later": "scheduled", "Draft": "draft", "Unscheduled": "scheduled"}
    assert due.published_at is not None


def test_publisher_is_idempotent(db_session) -> None:
    db_session.add(BlogArticle(title="Due", status="scheduled", scheduled_at=NOW - timedelta(minutes=1)))
    db_session.commit()

    assert len(publish_due_articles(db_session, now=NOW)) == 1
    db_session.commit()
    assert publish_due_articles(db_session, now=NOW) == []


def test_seed_taxonomy_is_idempotent(db_session) -> None:
    first = seed_blog_taxonomy(db_session)
    second = seed_blog_taxonomy(db_session)

    assert first == second == {"categories": 8, "tags": 15}
    assert db_session.query(BlogCategory).count() == len(SEED_CATEGORIES)
    assert db_session.query(BlogTag).count() == len(SEED_TAGS)


def test_seed_taxonomy_refreshes_existing_rows(db_session) -> None:
    db_session.add(BlogTag(name="Old SEO", slug="seo"))
    db_session.commit()

    seed_blog_taxonomy(db_session)
    db_session.expire_all()

    tag = db_session.query(BlogTag).filter(BlogTag.slug == "seo").one()
    assert tag.name == "SEO"


def test_worker_job_commits(session_factory, monkeypatch) -> None:
    from mwplu.workers import publisher as worker

    with session_factory() as session:
        session.add(BlogArticle(title="Due", status="scheduled", scheduled_at=datetime(2020, 1, 1, tzinfo=timezone.utc)))
        session.commit()

    monkeypatch.setattr(worker, "SessionLocal", session_factory)

    published = worker.run_publish_job()

    assert len(published) == 1
    with session_factory() as session:
        assert session.query(BlogArticle).one().status == "published"
