"""create_timeline_tree_tables

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "1a2b3c4d5e6f"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        # Null for the shared anonymous user
        sa.Column("name_identifier", sa.String(), nullable=True),
        sa.Column("identity_provider", sa.String(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False
        ),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_index("ix_users_display_name", "users", ["display_name"])
    op.create_index("ix_users_identity", "users", ["name_identifier", "identity_provider"])

    op.create_table(
        "super_collections",
        sa.Column("super_collection_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(["owner_id"], ["users.user_id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("super_collection_id"),
    )

    op.create_table(
        "collections",
        sa.Column("collection_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=True),
        sa.Column("super_collection_id", sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(["owner_id"], ["users.user_id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(
            ["super_collection_id"],
            ["super_collections.super_collection_id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("collection_id"),
    )

    op.create_table(
        "timelines",
        sa.Column("timeline_id", sa.Uuid(), nullable=False),
        sa.Column("collection_id", sa.Uuid(), nullable=False),
        sa.Column("parent_id", sa.Uuid(), nullable=True),
        sa.Column("title", sa.String(), nullable=True),
        sa.Column("regime", sa.String(), nullable=True),
        # Years; negative values are BCE
        sa.Column("from_year", sa.Numeric(), nullable=False),
        sa.Column("to_year", sa.Numeric(), nullable=False),
        sa.Column("depth", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["collection_id"], ["collections.collection_id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["parent_id"], ["timelines.timeline_id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("timeline_id"),
    )
    op.create_index("ix_timelines_collection_id", "timelines", ["collection_id"])
    op.create_index("ix_timelines_parent_id", "timelines", ["parent_id"])
    op.create_index(
        "ix_timelines_collection_range",
        "timelines",
        ["collection_id", "from_year", "to_year"],
    )
    op.create_index(
        "ix_timelines_collection_depth", "timelines", ["collection_id", "depth"]
    )

    op.create_table(
        "exhibits",
        sa.Column("exhibit_id", sa.Uuid(), nullable=False),
        sa.Column("collection_id", sa.Uuid(), nullable=False),
        sa.Column("timeline_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(), nullable=True),
        sa.Column("year", sa.Numeric(), nullable=False),
        sa.Column("depth", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["collection_id"], ["collections.collection_id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["timeline_id"], ["timelines.timeline_id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("exhibit_id"),
    )
    op.create_index("ix_exhibits_collection_id", "exhibits", ["collection_id"])
    op.create_index("ix_exhibits_timeline_id", "exhibits", ["timeline_id"])

    op.create_table(
        "content_items",
        sa.Column("content_item_id", sa.Uuid(), nullable=False),
        sa.Column("collection_id", sa.Uuid(), nullable=False),
        sa.Column("exhibit_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(), nullable=True),
        sa.Column("caption", sa.String(), nullable=True),
        sa.Column("media_type", sa.String(), nullable=True),
        sa.Column("uri", sa.String(), nullable=True),
        sa.Column("media_source", sa.String(), nullable=True),
        sa.Column("attribution", sa.String(), nullable=True),
        sa.Column("depth", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["collection_id"], ["collections.collection_id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["exhibit_id"], ["exhibits.exhibit_id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("content_item_id"),
    )
    op.create_index("ix_content_items_collection_id", "content_items", ["collection_id"])
    op.create_index("ix_content_items_exhibit_id", "content_items", ["exhibit_id"])

    op.create_table(
        "tours",
        sa.Column("tour_id", sa.Uuid(), nullable=False),
        sa.Column("collection_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["collection_id"], ["collections.collection_id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("tour_id"),
    )
    op.create_index("ix_tours_collection_id", "tours", ["collection_id"])

    op.create_table(
        "bookmarks",
        sa.Column("bookmark_id", sa.Uuid(), nullable=False),
        sa.Column("tour_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("url", sa.String(), nullable=True),
        sa.Column("lag_time", sa.Integer(), nullable=True),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("sequence_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["tour_id"], ["tours.tour_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("bookmark_id"),
    )


def downgrade() -> None:
    op.drop_table("bookmarks")
    op.drop_index("ix_tours_collection_id", table_name="tours")
    op.drop_table("tours")
    op.drop_index("ix_content_items_exhibit_id", table_name="content_items")
    op.drop_index("ix_content_items_collection_id", table_name="content_items")
    op.drop_table("content_items")
    op.drop_index("ix_exhibits_timeline_id", table_name="exhibits")
    op.drop_index("ix_exhibits_collection_id", table_name="exhibits")
    op.drop_table("exhibits")
    op.drop_index("ix_timelines_collection_depth", table_name="timelines")
    op.drop_index("ix_timelines_collection_range", table_name="timelines")
    op.drop_index("ix_timelines_parent_id", table_name="timelines")
    op.drop_index("ix_timelines_collection_id", table_name="timelines")
    op.drop_table("timelines")
    op.drop_table("collections")
    op.drop_table("super_collections")
    op.drop_index("ix_users_identity", table_name="users")
    op.drop_index("ix_users_display_name", table_name="users")
    op.drop_table("users")
