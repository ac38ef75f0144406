"""Create booking schema tables and the no_room_overlap exclusion constraint

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2024-02-20 10:12:31.418204

"""

import sqlalchemy as sa

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "3f1c2a9d7b10"
down_revision = None
branch_labels = None
depends_on = None

SCHEMA = "booking"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")

    op.create_table(
        "hotels",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
        schema=SCHEMA,
    )

    op.create_table(
        "room_types",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("base_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("capacity > 0", name="ck_room_types_capacity_positive"),
        sa.CheckConstraint("base_price >= 0", name="ck_room_types_base_price_non_negative"),
        schema=SCHEMA,
    )

    op.create_table(
        "rooms",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "hotel_id",
            sa.Integer(),
            sa.ForeignKey(f"{SCHEMA}.hotels.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "room_type_id", sa.Integer(), sa.ForeignKey(f"{SCHEMA}.room_types.id"), nullable=False
        ),
        sa.Column("room_number", sa.String(10), nullable=False),
        sa.Column("floor", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("hotel_id", "room_number", name="uq_rooms_hotel_room_number"),
        schema=SCHEMA,
    )
    op.create_index("ix_booking_rooms_hotel_id", "rooms", ["hotel_id"], schema=SCHEMA)

    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("customer_id", sa.Integer(), nullable=False),
        sa.Column(
            "room_id",
            sa.Integer(),
            sa.ForeignKey(f"{SCHEMA}.rooms.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("check_in_date", sa.Date(), nullable=False),
        sa.Column("check_out_date", sa.Date(), nullable=False),
        sa.Column("number_of_guests", sa.Integer(), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(20), server_default=sa.text("'pending'"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("check_out_date > check_in_date", name="ck_reservations_dates_ordered"),
        sa.CheckConstraint("number_of_guests > 0", name="ck_reservations_guests_positive"),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled')", name="ck_reservations_status"
        ),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_booking_reservations_customer_id", "reservations", ["customer_id"], schema=SCHEMA
    )
    op.create_index("ix_booking_reservations_room_id", "reservations", ["room_id"], schema=SCHEMA)
    op.create_index(
        "idx_reservations_dates",
        "reservations",
        ["check_in_date", "check_out_date"],
        schema=SCHEMA,
    )

    # Half-open '[)' ranges: a stay ending on day X does not collide with one starting on day X
    op.execute(
        f"""
        ALTER TABLE {SCHEMA}.reservations
        ADD CONSTRAINT no_room_overlap
        EXCLUDE USING gist (
            room_id WITH =,
            daterange(check_in_date, check_out_date, '[)') WITH &&
        )
        WHERE (status IN ('pending', 'confirmed'))
        """
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("reservations", schema=SCHEMA)
    op.drop_table("rooms", schema=SCHEMA)
    op.drop_table("room_types", schema=SCHEMA)
    op.drop_table("hotels", schema=SCHEMA)
    # btree_gist is left installed: other schemas may depend on it
