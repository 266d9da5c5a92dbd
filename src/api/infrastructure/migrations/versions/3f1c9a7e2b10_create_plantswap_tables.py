"""create plantswap tables

Create the tables for browser sessions, session credentials, uploaded
images, the species catalog and listings.

Revision ID: 3f1c9a7e2b10
Revises:
Create Date: 2026-10-19 09:12:44.318201

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7e2b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "web_sessions",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("data", postgresql.JSONB(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_web_sessions_expires_at"), "web_sessions", ["expires_at"]
    )

    op.create_table(
        "session_credentials",
        sa.Column("identity_id", sa.String(length=255), nullable=False),
        sa.Column("access_token", sa.String(length=10240), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("identity_id"),
    )

    op.create_table(
        "images",
        sa.Column("key", sa.String(length=26), nullable=False),
        sa.Column("owner_id", sa.String(length=255), nullable=True),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("key"),
    )
    op.create_index(op.f("ix_images_owner_id"), "images", ["owner_id"])
    op.create_index(op.f("ix_images_uploaded_at"), "images", ["uploaded_at"])

    op.create_table(
        "species",
        sa.Column("taxonomy_id", sa.String(length=255), nullable=False),
        sa.Column("gbif_id", sa.BigInteger(), nullable=True),
        sa.Column("common_name", sa.String(length=255), nullable=False),
        sa.Column("scientific_name", sa.String(length=255), nullable=False),
        sa.Column("habitat", sa.String(length=16), nullable=True),
        sa.Column("produces_fruit", sa.Boolean(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("taxonomy_id"),
        sa.CheckConstraint(
            "habitat IS NULL OR habitat IN ('indoor', 'outdoor')",
            name="ck_species_habitat",
        ),
    )

    listing_type = postgresql.ENUM("selling", "buying", name="listing_type")
    listing_type.create(op.get_bind())

    # Listings are written by the listing pages; this service only reads the
    # thumbnail reference when cleaning up images
    op.create_table(
        "listings",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("title", sa.String(length=120), nullable=False),
        sa.Column("description", sa.String(length=1023), nullable=False),
        sa.Column("insertion_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("author", sa.String(length=255), nullable=False),
        sa.Column(
            "listing_type",
            postgresql.ENUM(name="listing_type", create_type=False),
            nullable=False,
        ),
        sa.Column("thumbnail", sa.String(length=26), nullable=False),
        sa.Column("tradeable", sa.Boolean(), nullable=False),
        sa.Column("identified_species", sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["thumbnail"],
            ["images.key"],
            name="fk_listings_thumbnail",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["identified_species"],
            ["species.taxonomy_id"],
            name="fk_listings_identified_species",
            ondelete="RESTRICT",
        ),
    )
    op.create_index(op.f("ix_listings_author"), "listings", ["author"])
    op.create_index(op.f("ix_listings_thumbnail"), "listings", ["thumbnail"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_listings_thumbnail"), table_name="listings")
    op.drop_index(op.f("ix_listings_author"), table_name="listings")
    op.drop_table("listings")
    postgresql.ENUM(name="listing_type").drop(op.get_bind())
    op.drop_table("species")
    op.drop_index(op.f("ix_images_uploaded_at"), table_name="images")
    op.drop_index(op.f("ix_images_owner_id"), table_name="images")
    op.drop_table("images")
    op.drop_table("session_credentials")
    op.drop_index(op.f("ix_web_sessions_expires_at"), table_name="web_sessions")
    op.drop_table("web_sessions")
