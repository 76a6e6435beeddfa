"""initial schema

Revision ID: 5e1c2a7b9d30
Revises: 
Create Date: 2026-03-02 10:12:41.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '5e1c2a7b9d30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table("communities"):
        op.create_table(
            "communities",
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("address", sa.String(length=255), nullable=True),
            sa.Column("admin_email", sa.String(length=255), nullable=True),
            sa.Column("total_floors", sa.Integer(), nullable=True),
            sa.Column("units_per_floor", sa.Integer(), nullable=True),
            sa.Column("num_buildings", sa.Integer(), nullable=True),
            sa.Column("total_points", sa.Integer(), server_default="0", nullable=False),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )

    if not inspector.has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column("auth_id", sa.String(length=100), nullable=True),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("role", sa.String(length=20), server_default="RESIDENT", nullable=False),
            sa.Column("community_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("communities.id"), nullable=True),
            sa.Column("tower", sa.String(length=50), nullable=True),
            sa.Column("apartment", sa.String(length=50), nullable=True),
            sa.Column("avatar_url", sa.String(length=500), nullable=True),
            sa.Column("points", sa.Integer(), server_default="0", nullable=False),
            sa.Column("status", sa.String(length=20), server_default="ACTIVE", nullable=False),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
            sa.UniqueConstraint("email", name="uq_users_email"),
        )

    if not inspector.has_table("amenities"):
        op.create_table(
            "amenities",
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column("community_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("communities.id"), nullable=True),
            sa.Column("name", sa.String(length=100), nullable=False),
            sa.Column("description", sa.String(length=255), nullable=True),
            sa.Column("image_url", sa.String(length=500), nullable=True),
            sa.Column("amenity_type", sa.String(length=50), server_default="OTHER", nullable=False),
            sa.Column("category", sa.String(length=50), nullable=True),
            sa.Column("capacity", sa.Integer(), server_default="1", nullable=False),
            sa.Column("points_reward", sa.Integer(), server_default="10", nullable=False),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )

    if not inspector.has_table("reservations"):
        op.create_table(
            "reservations",
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("amenity_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("amenities.id"), nullable=False),
            sa.Column("date", sa.Date(), nullable=False),
            sa.Column("time_slot", sa.String(length=20), nullable=False),
            sa.Column("status", sa.String(length=20), server_default="ACTIVE", nullable=False),
            sa.Column("grade", sa.String(length=20), server_default="PENDING", nullable=False),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
            sa.Column("cancelled_at", sa.TIMESTAMP(), nullable=True),
            sa.Column("graded_at", sa.TIMESTAMP(), nullable=True),
        )

    existing_indexes = {ix["name"] for ix in inspector.get_indexes("reservations")}
    if "uq_reservations_amenity_date_slot_taken" not in existing_indexes:
        op.create_index(
            "uq_reservations_amenity_date_slot_taken",
            "reservations",
            ["amenity_id", "date", "time_slot"],
            unique=True,
            postgresql_where=sa.text("status <> 'CANCELLED'"),
        )
    if "ix_reservations_user_id_created_at" not in existing_indexes:
        op.create_index("ix_reservations_user_id_created_at", "reservations", ["user_id", "created_at"])

    if not inspector.has_table("point_logs"):
        op.create_table(
            "point_logs",
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("community_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("communities.id"), nullable=True),
            sa.Column("action", sa.String(length=50), nullable=False),
            sa.Column("points", sa.Integer(), nullable=False),
            sa.Column("description", sa.String(length=255), nullable=True),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )
        op.create_index("ix_point_logs_user_id", "point_logs", ["user_id"])
        op.create_index("ix_point_logs_community_id", "point_logs", ["community_id"])

    if not inspector.has_table("posts"):
        op.create_table(
            "posts",
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("community_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("communities.id"), nullable=False),
            sa.Column("text", sa.Text(), nullable=False),
            sa.Column("image_url", sa.String(length=500), nullable=True),
            sa.Column("post_type", sa.String(length=20), server_default="GENERAL", nullable=False),
            sa.Column("likes_count", sa.Integer(), server_default="0", nullable=False),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )

    if not inspector.has_table("comments"):
        op.create_table(
            "comments",
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column("post_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("posts.id"), nullable=False),
            sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("text", sa.Text(), nullable=False),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )
        op.create_index("ix_comments_post_id", "comments", ["post_id"])

    if not inspector.has_table("likes"):
        op.create_table(
            "likes",
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column("post_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("posts.id"), nullable=False),
            sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
            sa.UniqueConstraint("post_id", "user_id", name="uq_likes_post_id_user_id"),
        )

    if not inspector.has_table("join_requests"):
        op.create_table(
            "join_requests",
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column("ticket_code", sa.String(length=20), nullable=False),
            sa.Column("community_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("communities.id"), nullable=False),
            sa.Column("user_email", sa.String(length=255), nullable=False),
            sa.Column("user_name", sa.String(length=200), nullable=False),
            sa.Column("tower", sa.String(length=50), nullable=True),
            sa.Column("unit", sa.String(length=50), nullable=True),
            sa.Column("status", sa.String(length=20), server_default="PENDING", nullable=False),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
            sa.Column("decided_at", sa.TIMESTAMP(), nullable=True),
            sa.UniqueConstraint("ticket_code", name="uq_join_requests_ticket_code"),
        )


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    for table in ("join_requests", "likes", "comments", "posts", "point_logs", "reservations", "amenities", "users", "communities"):
        if inspector.has_table(table):
            op.drop_table(table)
