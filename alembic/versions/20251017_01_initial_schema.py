"""Initial Devmart schema."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20251017_01"
down_revision = None
branch_labels = None
depends_on = None

CONTENT_TABLES = ("pages", "services", "projects", "blog_posts")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    ]


def _content_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("excerpt", sa.Text()),
        sa.Column("body", sa.JSON()),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="draft"),
        sa.Column("published_at", sa.DateTime()),
        sa.Column("seo_title", sa.String(length=255)),
        sa.Column("seo_description", sa.String(length=512)),
        sa.Column("og_image", sa.String(length=512)),
        *_timestamps(),
    ]


def upgrade() -> None:
    for table in CONTENT_TABLES:
        extra = [sa.Column("tags", sa.JSON())] if table == "blog_posts" else []
        op.create_table(table, *_content_columns(), *extra)
        op.create_index(f"ix_{table}_slug", table, ["slug"], unique=True)

    op.create_table(
        "project_images",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "project_id",
            sa.String(length=36),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("url", sa.String(length=1024), nullable=False),
        sa.Column("alt", sa.String(length=255)),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_project_images_project_id", "project_images", ["project_id"])

    op.create_table(
        "blog_categories",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("slug", sa.String(length=128), nullable=False),
    )
    op.create_index("ix_blog_categories_slug", "blog_categories", ["slug"], unique=True)

    op.create_table(
        "blog_post_categories",
        sa.Column(
            "blog_post_id",
            sa.String(length=36),
            sa.ForeignKey("blog_posts.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "category_id",
            sa.String(length=36),
            sa.ForeignKey("blog_categories.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )

    op.create_table(
        "faqs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("question", sa.String(length=512), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False, unique=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="draft"),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )

    op.create_table(
        "contact_submissions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("subject", sa.String(length=200)),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("ip", sa.String(length=64)),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )

    op.create_table(
        "quotes",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36)),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("company", sa.String(length=100)),
        sa.Column("phone", sa.String(length=32)),
        sa.Column("service_type", sa.String(length=64), nullable=False),
        sa.Column("project_scope", sa.Text(), nullable=False),
        sa.Column("budget_range", sa.String(length=32), nullable=False),
        sa.Column("timeline", sa.String(length=32), nullable=False),
        sa.Column("additional_requirements", sa.Text()),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("priority", sa.String(length=16), nullable=False, server_default="normal"),
        sa.Column("admin_notes", sa.Text()),
        sa.Column("assigned_to", sa.String(length=36)),
        sa.Column("estimated_cost", sa.Integer()),
        sa.Column("ip_address", sa.String(length=64)),
        sa.Column("user_agent", sa.String(length=500)),
        *_timestamps(),
    )
    op.create_index("ix_quotes_email", "quotes", ["email"])

    op.create_table(
        "quote_activities",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "quote_id",
            sa.String(length=36),
            sa.ForeignKey("quotes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(length=36)),
        sa.Column("activity_type", sa.String(length=32), nullable=False),
        sa.Column("old_value", sa.String(length=255)),
        sa.Column("new_value", sa.String(length=255)),
        sa.Column("notes", sa.Text()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_quote_activities_quote_id", "quote_activities", ["quote_id"])

    op.create_table(
        "proposal_templates",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("variables", sa.JSON()),
        sa.Column("service_type", sa.String(length=64)),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="draft"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")),
        sa.Column("created_by", sa.String(length=36)),
        *_timestamps(),
    )

    op.create_table(
        "app_config",
        sa.Column("key", sa.String(length=64), primary_key=True),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )

    op.create_table(
        "settings",
        sa.Column("key", sa.String(length=64), primary_key=True),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_by", sa.String(length=64)),
    )

    op.create_table(
        "profiles",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=128), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False, server_default="viewer"),
        sa.Column("disabled", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")),
        *_timestamps(),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=True)

    op.create_table(
        "orders",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36)),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(length=8), nullable=False, server_default="usd"),
        sa.Column("provider", sa.String(length=32), nullable=False),
        sa.Column("provider_order_id", sa.String(length=64)),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="pending"),
        sa.Column("metadata", sa.JSON()),
        *_timestamps(),
    )
    op.create_index("ix_orders_provider_order_id", "orders", ["provider_order_id"])

    op.create_table(
        "app_events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("level", sa.String(length=16), nullable=False),
        sa.Column("area", sa.String(length=64), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("meta", sa.JSON()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_app_events_area", "app_events", ["area"])


def downgrade() -> None:
    op.drop_index("ix_app_events_area", table_name="app_events")
    op.drop_table("app_events")
    op.drop_index("ix_orders_provider_order_id", table_name="orders")
    op.drop_table("orders")
    op.drop_index("ix_profiles_email", table_name="profiles")
    op.drop_table("profiles")
    op.drop_table("settings")
    op.drop_table("app_config")
    op.drop_table("proposal_templates")
    op.drop_index("ix_quote_activities_quote_id", table_name="quote_activities")
    op.drop_table("quote_activities")
    op.drop_index("ix_quotes_email", table_name="quotes")
    op.drop_table("quotes")
    op.drop_table("contact_submissions")
    op.drop_table("faqs")
    op.drop_table("blog_post_categories")
    op.drop_index("ix_blog_categories_slug", table_name="blog_categories")
    op.drop_table("blog_categories")
    op.drop_index("ix_project_images_project_id", table_name="project_images")
    op.drop_table("project_images")
    for table in reversed(CONTENT_TABLES):
        op.drop_index(f"ix_{table}_slug", table_name=table)
        op.drop_table(table)
