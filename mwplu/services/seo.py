from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

META_TITLE_RANGE = (30, 60)
META_DESCRIPTION_RANGE = (70, 160)
MIN_WORD_COUNT = 300

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_MARKDOWN_H1 = re.compile(r"^#\s+\S", re.MULTILINE)
_HTML_H1 = re.compile(r"<h1[\s>]", re.IGNORECASE)
_WORD = re.compile(r"[\w'’-]+", re.UNICODE)


@dataclass
class SeoIssue:
    field: str
    severity: str
    message: str


@dataclass
class SeoReport:
    score: float
    checks: dict[str, bool] = field(default_factory=dict)
    issues: list[SeoIssue] = field(default_factory=list)
    word_count: int = 0

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def slug_from_canonical(canonical_url: str | None) -> str | None:
    segments = [segment for segment in (canonical_url or "").split("/") if segment]
    return segments[-1] if segments else None


def _length_check(value: str, bounds: tuple[int, int]) -> bool:
    low, high = bounds
    return low <= len(value) <= high


def validate_seo(payload: Mapping[str, Any]) -> SeoReport:
    """Heuristic SEO review of a draft. Every check weighs the same."""
    meta_title = (payload.get("meta_title") or "").strip()
    meta_description = (payload.get("meta_description") or "").strip()
    content = payload.get("content") or ""
    slug = (payload.get("slug") or slug_from_canonical(payload.get("canonical_url")) or "").strip()
    keyword = (payload.get("focus_keyword") or "").strip().lower()

    words = _WORD.findall(content)
    h1_count = len(_MARKDOWN_H1.findall(content)) + len(_HTML_H1.findall(content))

    checks: dict[str, bool] = {
        "meta_title_length": _length_check(meta_title, META_TITLE_RANGE),
        "meta_description_length": _length_check(meta_description, META_DESCRIPTION_RANGE),
        "slug_format": bool(slug) and bool(_SLUG_PATTERN.match(slug)),
        "word_count": len(words) >= MIN_WORD_COUNT,
        "single_h1": h1_count == 1,
    }
    if keyword:
        checks["keyword_in_title"] = keyword in meta_title.lower()
        checks["keyword_in_description"] = keyword in meta_description.lower()
        checks["keyword_in_content"] = keyword in content.lower()

    issues: list[SeoIssue] = []
    if not checks["meta_title_length"]:
        issues.append(
            SeoIssue("meta_title", "error", f"Meta title must be {META_TITLE_RANGE[0]}-{META_TITLE_RANGE[1]} characters (got {len(meta_title)})")
        )
    if not checks["meta_description_length"]:
        issues.append(
            SeoIssue(
                "meta_description",
                "error",
                f"Meta description must be {META_DESCRIPTION_RANGE[0]}-{META_DESCRIPTION_RANGE[1]} characters (got {len(meta_description)})",
            )
        )
    if not checks["slug_format"]:
        issues.append(SeoIssue("slug", "error", "Slug must be lowercase words separated by hyphens"))
    if not checks["word_count"]:
        issues.append(SeoIssue("content", "warning", f"Content has {len(words)} words; aim for at least {MIN_WORD_COUNT}"))
    if not checks["single_h1"]:
        issues.append(SeoIssue("content", "warning", f"Content should have exactly one H1 heading (found {h1_count})"))
    for name in ("keyword_in_title", "keyword_in_description", "keyword_in_content"):
        if name in checks and not checks[name]:
            target = name.removeprefix("keyword_in_")
            issues.append(SeoIssue("focus_keyword", "warning", f"Focus keyword missing from {target}"))

    passed = sum(1 for value in checks.values() if value)
    score = round(100.0 * passed / len(checks), 1)
    return SeoReport(score=score, checks=checks, issues=issues, word_count=len(words))
