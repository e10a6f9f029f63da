"""Initial schema: universities, users, connections, mentorship, notifications.

Revision ID: 001
Revises:
Create Date: Initial

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# UUIDs are stored as VARCHAR(36) (alumni_connect.models.types.UuidType)
UUID = sa.String(36)


def upgrade() -> None:
    op.create_table(
        "universities",
        sa.Column("id", sa.String(50), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("logo", sa.Text(), nullable=True),
        sa.Column("colors", sa.JSON(), nullable=True),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "users",
        sa.Column("id", UUID, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("university_id", sa.String(50), nullable=True),
        sa.Column("graduation_year", sa.Integer(), nullable=True),
        sa.Column("major", sa.String(255), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="alumni"),
        sa.Column("is_mentor", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("role IN ('alumni', 'admin', 'superadmin')", name="users_role_check"),
        sa.CheckConstraint("status IN ('active', 'deactivated')", name="users_status_check"),
        sa.CheckConstraint("role = 'superadmin' OR university_id IS NOT NULL", name="users_tenant_check"),
        sa.ForeignKeyConstraint(["university_id"], ["universities.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_university_id", "users", ["university_id"], unique=False)
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "connections",
        sa.Column("id", UUID, nullable=False),
        sa.Column("user_a_id", UUID, nullable=False),
        sa.Column("user_b_id", UUID, nullable=False),
        sa.Column("connected_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("user_a_id <> user_b_id", name="connections_not_self_check"),
        sa.ForeignKeyConstraint(["user_a_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_b_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_a_id", "user_b_id", name="connections_pair_key"),
    )
    op.create_index("ix_connections_user_a_id", "connections", ["user_a_id"], unique=False)
    op.create_index("ix_connections_user_b_id", "connections", ["user_b_id"], unique=False)

    op.create_table(
        "connection_requests",
        sa.Column("id", UUID, nullable=False),
        sa.Column("from_user_id", UUID, nullable=False),
        sa.Column("to_user_id", UUID, nullable=False),
        sa.Column("pair_key", sa.String(80), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')", name="connection_requests_status_check"
        ),
        sa.ForeignKeyConstraint(["from_user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["to_user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("pair_key", name="connection_requests_pair_key_key"),
    )
    op.create_index("ix_connection_requests_from_user_id", "connection_requests", ["from_user_id"], unique=False)
    op.create_index("ix_connection_requests_to_user_id", "connection_requests", ["to_user_id"], unique=False)
    op.create_index("ix_connection_requests_status", "connection_requests", ["status"], unique=False)

    op.create_table(
        "mentors",
        sa.Column("id", UUID, nullable=False),
        sa.Column("user_id", UUID, nullable=False),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("company", sa.String(255), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("availability", sa.String(100), nullable=True),
        sa.Column("years_experience", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("mentees_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("status IN ('active', 'inactive')", name="mentors_status_check"),
        sa.CheckConstraint("mentees_count >= 0", name="mentors_mentees_count_check"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", name="mentors_user_id_key"),
    )
    op.create_index("ix_mentors_status", "mentors", ["status"], unique=False)

    op.create_table(
        "mentor_expertise",
        sa.Column("id", UUID, nullable=False),
        sa.Column("mentor_id", UUID, nullable=False),
        sa.Column("tag", sa.String(100), nullable=False),
        sa.ForeignKeyConstraint(["mentor_id"], ["mentors.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("mentor_id", "tag", name="mentor_expertise_tag_key"),
    )
    op.create_index("ix_mentor_expertise_mentor_id", "mentor_expertise", ["mentor_id"], unique=False)
    op.create_index("ix_mentor_expertise_tag", "mentor_expertise", ["tag"], unique=False)

    op.create_table(
        "mentorship_requests",
        sa.Column("id", UUID, nullable=False),
        sa.Column("mentor_id", UUID, nullable=False),
        sa.Column("mentee_id", UUID, nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')", name="mentorship_requests_status_check"
        ),
        sa.ForeignKeyConstraint(["mentor_id"], ["mentors.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["mentee_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("mentor_id", "mentee_id", name="mentorship_requests_pair_key"),
    )
    op.create_index("ix_mentorship_requests_mentor_id", "mentorship_requests", ["mentor_id"], unique=False)
    op.create_index("ix_mentorship_requests_mentee_id", "mentorship_requests", ["mentee_id"], unique=False)
    op.create_index("ix_mentorship_requests_status", "mentorship_requests", ["status"], unique=False)

    op.create_table(
        "notifications",
        sa.Column("id", UUID, nullable=False),
        sa.Column("user_id", UUID, nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("action_url", sa.Text(), nullable=True),
        sa.Column("related_id", UUID, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"], unique=False)
    op.create_index("ix_notifications_is_read", "notifications", ["is_read"], unique=False)
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("mentorship_requests")
    op.drop_table("mentor_expertise")
    op.drop_table("mentors")
    op.drop_table("connection_requests")
    op.drop_table("connections")
    op.drop_table("users")
    op.drop_table("universities")
