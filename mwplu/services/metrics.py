from __future__ import annotations

from prometheus_client import Counter


BLOG_STATUS_CHANGES_COUNTER = Counter(
    "mwplu_blog_status_changes_total",
    "Blog article status changes by target status",
    ["status"],
)

DOWNLOADS_COUNTER = Counter(
    "mwplu_downloads_total",
    "Limited download requests by outcome",
    ["outcome"],
)

ANALYTICS_EVENTS_COUNTER = Counter(
    "mwplu_blog_analytics_events_total",
    "Blog analytics events recorded",
    ["event_type"],
)

SEO_VALIDATIONS_COUNTER = Counter(
    "mwplu_seo_validations_total",
    "SEO validations run, bucketed by score",
    ["bucket"],
)


def record_status_change(status: str) -> None:
    BLOG_STATUS_CHANGES_COUNTER.labels(status=status).inc()


def record_download(outcome: str) -> None:
    DOWNLOADS_COUNTER.labels(outcome=outcome).inc()


def record_analytics_event(event_type: str) -> None:
    ANALYTICS_EVENTS_COUNTER.labels(event_type=event_type or "unknown").inc()


def _score_bucket(score: float) -> str:
    if score < 50:
        return "<50"
    if score < 80:
        return "50-80"
    return ">=80"


def record_seo_validation(score: float) -> None:
    SEO_VALIDATIONS_COUNTER.labels(bucket=_score_bucket(score)).inc()
