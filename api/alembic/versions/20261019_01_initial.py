"""Initial schema."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "20261019_01_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(64), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("external_id", sa.Integer(), nullable=True),
        sa.Column("external_number", sa.String(32), nullable=True),
        sa.Column("balance", sa.Float(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("referral_code", sa.String(64), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_external_number", "users", ["external_number"])
    op.create_index("ix_users_deleted_at", "users", ["deleted_at"])

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("is_admin_only", sa.Boolean(), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="uq_categories_slug"),
    )
    op.create_index("ix_categories_deleted_at", "categories", ["deleted_at"])

    op.create_table(
        "tags",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="uq_tags_slug"),
    )
    op.create_index("ix_tags_deleted_at", "tags", ["deleted_at"])

    op.create_table(
        "articles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=False),
        sa.Column("thumbnail", sa.Text(), nullable=False),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=False),
        sa.Column("author_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("views", sa.Integer(), nullable=False),
        sa.Column("reward_amount", sa.Float(), nullable=False),
        sa.Column("is_rewarded", sa.Boolean(), nullable=False),
        sa.Column("revision_of", sa.Integer(), sa.ForeignKey("articles.id"), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("views >= 0", name="ck_articles_views_non_negative"),
        sa.CheckConstraint("reward_amount >= 0", name="ck_articles_reward_non_negative"),
    )
    op.create_index(
        "uq_articles_live_slug",
        "articles",
        ["slug"],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL"),
        sqlite_where=sa.text("deleted_at IS NULL"),
    )
    op.create_index("idx_articles_status", "articles", ["status"])
    op.create_index("idx_articles_revision_of", "articles", ["revision_of"])
    op.create_index("idx_articles_author", "articles", ["author_id"])
    op.create_index("ix_articles_deleted_at", "articles", ["deleted_at"])

    op.create_table(
        "article_tags",
        sa.Column(
            "article_id",
            sa.Integer(),
            sa.ForeignKey("articles.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "tag_id",
            sa.Integer(),
            sa.ForeignKey("tags.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )


def downgrade() -> None:
    op.drop_table("article_tags")
    op.drop_index("ix_articles_deleted_at", table_name="articles")
    op.drop_index("idx_articles_author", table_name="articles")
    op.drop_index("idx_articles_revision_of", table_name="articles")
    op.drop_index("idx_articles_status", table_name="articles")
    op.drop_index("uq_articles_live_slug", table_name="articles")
    op.drop_table("articles")
    op.drop_index("ix_tags_deleted_at", table_name="tags")
    op.drop_table("tags")
    op.drop_index("ix_categories_deleted_at", table_name="categories")
    op.drop_table("categories")
    op.drop_index("ix_users_deleted_at", table_name="users")
    op.drop_index("ix_users_external_number", table_name="users")
    op.drop_table("users")
