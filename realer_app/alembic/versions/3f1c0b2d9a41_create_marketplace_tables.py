"""create marketplace tables

Revision ID: 3f1c0b2d9a41
Revises:
Create Date: 2026-10-18 09:12:40.511203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c0b2d9a41'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id():
    return sa.Column("id", sa.UUID(as_uuid=True), primary_key=True)


def _fk(name, target, ondelete="CASCADE", nullable=False, index=True):
    return sa.Column(
        name,
        sa.UUID(as_uuid=True),
        sa.ForeignKey(target, ondelete=ondelete),
        nullable=nullable,
        index=index,
    )


def _ts(name, index=False):
    return sa.Column(name, sa.DateTime(timezone=True), nullable=True, index=index)


def _status(name, *values):
    return sa.Enum(*values, name=name, native_enum=False)


def upgrade():
    op.create_table(
        "profiles",
        _id(),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column(
            "account_type",
            _status("accounttype", "BUYER", "SELLER", "WHOLESALER"),
            nullable=False,
        ),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        _ts("created_at"),
    )

    op.create_table(
        "property_listings",
        _id(),
        _fk("user_id", "profiles.id"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(300), nullable=True, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(15, 2), nullable=False),
        sa.Column("market_price", sa.Numeric(15, 2), nullable=False),
        sa.Column("location", sa.String(255), nullable=False, index=True),
        sa.Column("full_address", sa.String(255), nullable=False),
        sa.Column("city", sa.String(120), nullable=False),
        sa.Column("state", sa.String(64), nullable=False),
        sa.Column("zip_code", sa.String(16), nullable=False),
        sa.Column("beds", sa.Integer(), nullable=False),
        sa.Column("baths", sa.Numeric(4, 1), nullable=False),
        sa.Column("sqft", sa.Integer(), nullable=False),
        sa.Column("property_type", sa.String(64), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("reward", sa.Numeric(15, 2), nullable=True),
        sa.Column("after_repair_value", sa.Numeric(15, 2), nullable=True),
        sa.Column("estimated_rehab", sa.Numeric(15, 2), nullable=True),
        sa.Column("comparable_addresses", sa.JSON(), nullable=False),
        sa.Column("additional_images_link", sa.String(512), nullable=True),
        _ts("created_at", index=True),
        _ts("updated_at"),
    )

    op.create_table(
        "conversations",
        _id(),
        _fk("participant1", "profiles.id"),
        _fk("participant2", "profiles.id"),
        _ts("created_at"),
        _ts("updated_at"),
        sa.UniqueConstraint(
            "participant1", "participant2", name="uq_conversation_pair"
        ),
    )

    op.create_table(
        "property_offers",
        _id(),
        _fk("property_id", "property_listings.id"),
        _fk("user_id", "profiles.id"),
        _fk("seller_id", "profiles.id"),
        sa.Column("offer_amount", sa.Numeric(15, 2), nullable=False),
        sa.Column(
            "status",
            _status("offerstatus", "PENDING", "ACCEPTED", "DECLINED"),
            nullable=False,
        ),
        sa.Column("is_interested", sa.Boolean(), nullable=False),
        sa.Column("proof_of_funds_url", sa.String(512), nullable=True),
        _ts("created_at"),
        _ts("updated_at"),
    )

    op.create_table(
        "messages",
        _id(),
        _fk("conversation_id", "conversations.id"),
        _fk("sender_id", "profiles.id"),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        _fk("related_offer_id", "property_offers.id", "SET NULL", True, False),
        _fk("property_id", "property_listings.id", "SET NULL", True, False),
        _ts("created_at", index=True),
    )

    op.create_table(
        "waitlist_requests",
        _id(),
        _fk("user_id", "profiles.id"),
        _fk("property_id", "property_listings.id"),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column(
            "status",
            _status("waitliststatus", "PENDING", "ACCEPTED", "DECLINED"),
            nullable=False,
        ),
        _ts("created_at"),
        _ts("updated_at"),
        sa.UniqueConstraint(
            "user_id", "property_id", name="uq_waitlist_user_property"
        ),
    )

    op.create_table(
        "bounty_claims",
        _id(),
        _fk("user_id", "profiles.id"),
        _fk("property_id", "property_listings.id"),
        _fk("buyer_id", "profiles.id", "SET NULL", True, False),
        sa.Column(
            "status",
            _status(
                "bountystatus",
                "CLAIMED",
                "FOUND_BUYER",
                "SUBMITTED_OFFER",
                "ACCEPTED_OFFER",
                "CLOSED",
            ),
            nullable=False,
        ),
        sa.Column("reward_amount", sa.Numeric(15, 2), nullable=False),
        sa.Column("status_details", sa.JSON(), nullable=False),
        _ts("created_at"),
        _ts("updated_at"),
        sa.UniqueConstraint("user_id", "property_id", name="uq_bounty_user_property"),
    )

    op.create_table(
        "notifications",
        _id(),
        _fk("user_id", "profiles.id"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "type",
            _status(
                "notificationtype",
                "INFO",
                "SUCCESS",
                "WARNING",
                "ERROR",
                "REWARD",
                "OFFER",
            ),
            nullable=False,
        ),
        sa.Column("read", sa.Boolean(), nullable=False),
        sa.Column("properties", sa.JSON(), nullable=True),
        _ts("created_at", index=True),
    )
    op.create_index(
        "idx_notifications_user_read", "notifications", ["user_id", "read"]
    )

    op.create_table(
        "liked_properties",
        _id(),
        _fk("user_id", "profiles.id"),
        _fk("property_id", "property_listings.id", index=False),
        _ts("created_at"),
        sa.UniqueConstraint("user_id", "property_id", name="uq_liked_user_property"),
    )

    op.create_table(
        "location_alerts",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("max_price", sa.Numeric(15, 2), nullable=True),
        sa.Column("property_type", sa.String(64), nullable=True),
        sa.Column("is_agent", sa.Boolean(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        _ts("created_at"),
    )

    op.create_table(
        "blog_posts",
        _id(),
        _fk("user_id", "profiles.id"),
        _fk("property_id", "property_listings.id", "SET NULL", True, False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author", sa.String(255), nullable=False),
        sa.Column("image", sa.String(512), nullable=True),
        sa.Column("read_time", sa.String(32), nullable=True),
        _ts("created_at", index=True),
        _ts("updated_at"),
    )


def downgrade():
    op.drop_table("blog_posts")
    op.drop_table("location_alerts")
    op.drop_table("liked_properties")
    op.drop_index("idx_notifications_user_read", table_name="notifications")
    op.drop_table("notifications")
    op.drop_table("bounty_claims")
    op.drop_table("waitlist_requests")
    op.drop_table("messages")
    op.drop_table("property_offers")
    op.drop_table("conversations")
    op.drop_table("property_listings")
    op.drop_table("profiles")
