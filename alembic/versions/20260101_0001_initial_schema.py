"""Initial schema: zoning catalogue, engagement, profiles, blog"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "20260101_0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

UUID = postgresql.UUID(as_uuid=True)


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)]
    if updated:
        columns.append(sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False))
    return columns


def upgrade() -> None:
    op.create_table(
        "cities",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("insee_code", sa.String(), nullable=True, unique=True),
        *_timestamps(updated=False),
    )
    op.create_index("ix_cities_name", "cities", ["name"])

    op.create_table(
        "zonings",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("city_id", UUID, sa.ForeignKey("cities.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index("ix_zonings_city_id", "zonings", ["city_id"])

    op.create_table(
        "zones",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("zoning_id", UUID, sa.ForeignKey("zonings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index("ix_zones_zoning_id", "zones", ["zoning_id"])

    op.create_table(
        "typologies",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
    )

    op.create_table(
        "documents",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("city_id", UUID, sa.ForeignKey("cities.id", ondelete="SET NULL"), nullable=True),
        sa.Column("zoning_id", UUID, sa.ForeignKey("zonings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("zone_id", UUID, sa.ForeignKey("zones.id", ondelete="CASCADE"), nullable=False),
        sa.Column("typology_id", UUID, sa.ForeignKey("typologies.id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.String(), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("html_content", sa.Text(), nullable=True),
        sa.Column("content_json", postgresql.JSONB(), nullable=True),
        sa.Column("storage_key", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_documents_city_id", "documents", ["city_id"])
    op.create_index("ix_documents_zoning_id", "documents", ["zoning_id"])
    op.create_index("ix_documents_zone_id", "documents", ["zone_id"])

    op.create_table(
        "profiles",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("pseudo", sa.String(), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("download_bonus", sa.Integer(), server_default="0", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"])

    op.create_table(
        "comments",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("document_id", UUID, sa.ForeignKey("documents.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", UUID, nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_comments_document_id", "comments", ["document_id"])
    op.create_index("ix_comments_user_id", "comments", ["user_id"])

    op.create_table(
        "deleted_comments",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("document_id", UUID, nullable=False),
        sa.Column("user_id", UUID, nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("deleted_by", UUID, nullable=True),
    )
    op.create_index("ix_deleted_comments_document_id", "deleted_comments", ["document_id"])

    op.create_table(
        "ratings",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("document_id", UUID, sa.ForeignKey("documents.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", UUID, nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("document_id", "user_id", name="uq_ratings_document_user"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_ratings_range"),
    )
    op.create_index("ix_ratings_document_id", "ratings", ["document_id"])

    op.create_table(
        "downloads",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("document_id", UUID, sa.ForeignKey("documents.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", UUID, nullable=False),
        sa.Column("type", sa.String(), server_default="pdf", nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index("ix_downloads_document_id", "downloads", ["document_id"])
    op.create_index("ix_downloads_user_id", "downloads", ["user_id"])

    op.create_table(
        "contact_messages",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        *_timestamps(updated=False),
    )

    op.create_table(
        "research_history",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("user_id", UUID, nullable=True),
        sa.Column("city_id", UUID, sa.ForeignKey("cities.id", ondelete="SET NULL"), nullable=True),
        sa.Column("address_input", sa.String(), nullable=True),
        sa.Column("geo_lon", sa.Float(), nullable=True),
        sa.Column("geo_lat", sa.Float(), nullable=True),
        sa.Column("zone_label", sa.String(), nullable=True),
        sa.Column("success", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index("ix_research_history_user_id", "research_history", ["user_id"])

    op.create_table(
        "company_context",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("mission", sa.Text(), nullable=True),
        sa.Column("values", postgresql.JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("tone", sa.String(), nullable=True),
        sa.Column("messaging", sa.Text(), nullable=True),
        sa.Column("brand_voice_guidelines", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_by", UUID, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_company_context_is_active", "company_context", ["is_active"])

    op.create_table(
        "blog_categories",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(updated=False),
    )

    op.create_table(
        "blog_tags",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(updated=False),
    )

    op.create_table(
        "blog_articles",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=True),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), server_default="", nullable=False),
        sa.Column("markdown_content", sa.Text(), server_default="", nullable=False),
        sa.Column("status", sa.String(length=20), server_default="draft", nullable=False),
        sa.Column("category_id", UUID, sa.ForeignKey("blog_categories.id", ondelete="SET NULL"), nullable=True),
        sa.Column("cover_image_url", sa.String(), nullable=True),
        sa.Column("meta_title", sa.String(), nullable=True),
        sa.Column("meta_description", sa.Text(), nullable=True),
        sa.Column("canonical_url", sa.String(), nullable=True),
        sa.Column("author_id", UUID, sa.ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('draft', 'ready', 'scheduled', 'published', 'archived')",
            name="ck_blog_articles_status",
        ),
    )
    op.create_index("ix_blog_articles_slug", "blog_articles", ["slug"])
    op.create_index("ix_blog_articles_status", "blog_articles", ["status"])
    op.create_index("ix_blog_articles_scheduled_at", "blog_articles", ["scheduled_at"])

    op.create_table(
        "blog_article_tags",
        sa.Column("article_id", UUID, sa.ForeignKey("blog_articles.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("tag_id", UUID, sa.ForeignKey("blog_tags.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "blog_seo_audits",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("article_id", UUID, sa.ForeignKey("blog_articles.id", ondelete="CASCADE"), nullable=True),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("report", postgresql.JSONB(), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column("created_by", UUID, nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index("ix_blog_seo_audits_article_id", "blog_seo_audits", ["article_id"])

    op.create_table(
        "blog_analytics_events",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("article_id", UUID, sa.ForeignKey("blog_articles.id", ondelete="CASCADE"), nullable=True),
        sa.Column("user_id", UUID, nullable=False),
        sa.Column("event_type", sa.String(), nullable=False),
        sa.Column("value", sa.Integer(), nullable=True),
        sa.Column("data", postgresql.JSONB(), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column("at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_blog_analytics_events_article_id", "blog_analytics_events", ["article_id"])


def downgrade() -> None:
    for table in (
        "blog_analytics_events",
        "blog_seo_audits",
        "blog_article_tags",
        "blog_articles",
        "blog_tags",
        "blog_categories",
        "company_context",
        "research_history",
        "contact_messages",
        "downloads",
        "ratings",
        "deleted_comments",
        "comments",
        "profiles",
        "documents",
        "typologies",
        "zones",
        "zonings",
        "cities",
    ):
        op.drop_table(table)
