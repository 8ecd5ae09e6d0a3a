from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from ..db.upsert import upsert
from ..models import BlogCategory, BlogTag

logger = logging.getLogger(__name__)

SEED_CATEGORIES: list[dict[str, Any]] = [
    {"name": "Urban Planning", "slug": "urban-planning", "description": "Articles about urban planning principles", "color": "#2B6CB0", "is_active": True},
    {"name": "Zoning", "slug": "zoning", "description": "Zoning rules and practices", "color": "#9B2C2C", "is_active": True},
    {"name": "PLU Guides", "slug": "plu-guides", "description": "Guides on PLU usage and compliance", "color": "#2F855A", "is_active": True},
    {"name": "Case Studies", "slug": "case-studies", "description": "Real-world examples and analyses", "color": "#805AD5", "is_active": True},
    {"name": "Regulatory Updates", "slug": "regulatory-updates", "description": "Latest rules and changes", "color": "#B7791F", "is_active": True},
    {"name": "Tutorials", "slug": "tutorials", "description": "How-to tutorials and walkthroughs", "color": "#2C5282", "is_active": True},
    {"name": "Tools & Methods", "slug": "tools-methods", "description": "Methods, frameworks and tools", "color": "#744210", "is_active": True},
    {"name": "News & Events", "slug": "news-events", "description": "Announcements and events", "color": "#4A5568", "is_active": True},
]

SEED_TAGS: list[dict[str, Any]] = [
    {"name": "SEO", "slug": "seo", "description": "Search engine optimization"},
    {"name": "Zoning", "slug": "zoning", "description": "Zoning rules"},
    {"name": "PLU", "slug": "plu", "description": "Plan Local d’Urbanisme"},
    {"name": "Urban Planning", "slug": "urban-planning", "description": "Urbanism and city design"},
    {"name": "Regulations", "slug": "regulations", "description": "Regulatory content"},
    {"name": "Case Study", "slug": "case-study", "description": "Case studies"},
    {"name": "Guide", "slug": "guide", "description": "Guides and how-to"},
    {"name": "Tutorial", "slug": "tutorial", "description": "Tutorials"},
    {"name": "Tools", "slug": "tools", "description": "Tools and utilities"},
    {"name": "Methods", "slug": "methods", "description": "Methods and frameworks"},
    {"name": "Analytics", "slug": "analytics", "description": "Measurement and reporting"},
    {"name": "Policy", "slug": "policy", "description": "Policies"},
    {"name": "Environment", "slug": "environment", "description": "Environmental topics"},
    {"name": "Housing", "slug": "housing", "description": "Housing topics"},
    {"name": "Mobility", "slug": "mobility", "description": "Transport and mobility"},
]


def seed_blog_taxonomy(db: Session) -> dict[str, int]:
    """Idempotently upsert the blog categories and tags, keyed on slug."""
    upsert(db, BlogCategory, SEED_CATEGORIES, conflict_columns=("slug",), returning=False)
    upsert(db, BlogTag, SEED_TAGS, conflict_columns=("slug",), returning=False)
    db.commit()
    logger.info("blog_taxonomy_seeded categories=%s tags=%s", len(SEED_CATEGORIES), len(SEED_TAGS))
    return {"categories": len(SEED_CATEGORIES), "tags": len(SEED_TAGS)}
