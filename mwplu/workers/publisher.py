from __future__ import annotations

import logging
import sys
from contextlib import contextmanager

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..config import settings
from ..db.session import SessionLocal, is_configured
from ..services.publisher import publish_due_articles


logger = logging.getLogger(__name__)


@contextmanager
def session_scope():
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def run_publish_job() -> list[str]:
    with session_scope() as session:
        published = publish_due_articles(session)
    if published:
        logger.info("Published scheduled articles: %s", published)
    return published


def configure_scheduler() -> BlockingScheduler:
    scheduler = BlockingScheduler(timezone="UTC")
    scheduler.add_job(run_publish_job, IntervalTrigger(minutes=settings.publish_interval_minutes))
    return scheduler


def main() -> None:
    logging.basicConfig(level=logging.INFO, handlers=[logging.StreamHandler(sys.stdout)])

    if not is_configured():
        logger.error("DATABASE_URL is not set; nothing to publish")
        sys.exit(1)

    if len(sys.argv) > 1 and sys.argv[1] == "run-once":
        logger.info("Running publisher once")
        run_publish_job()
        return

    scheduler = configure_scheduler()
    logger.info("Starting scheduled-article publisher")
    scheduler.start()


if __name__ == "__main__":
    main()
