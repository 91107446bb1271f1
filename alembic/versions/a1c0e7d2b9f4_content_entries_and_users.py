"""content entries with embedded history + users

Revision ID: a1c0e7d2b9f4
Revises:
Create Date: 2026-10-18 10:12:44.118302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'a1c0e7d2b9f4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STATUSES = ("draft", "published", "archived")


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=160), nullable=False),
        sa.Column("first_name", sa.String(length=80), nullable=True),
        sa.Column("last_name", sa.String(length=80), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "content_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("key", sa.String(length=160), nullable=False),
        sa.Column("locale", sa.String(length=16), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("description", sa.String(length=512), nullable=True),
        sa.Column("page", sa.String(length=64), nullable=True),
        sa.Column("section", sa.String(length=64), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*STATUSES, name="content_entry_status", native_enum=False, create_constraint=True),
            nullable=False,
        ),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("updated_by", sa.Integer(), nullable=True),
        sa.Column(
            "change_history",
            sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("key", "locale", "version", name="uq_content_entry_key_locale_version"),
    )
    op.create_index("ix_content_entries_key_locale_active", "content_entries", ["key", "locale", "is_active"])
    op.create_index("ix_content_entries_page_section", "content_entries", ["page", "section"])
    op.create_index("ix_content_entries_updated_at", "content_entries", ["updated_at"])
    op.create_index("ix_content_entries_status", "content_entries", ["status"])


def downgrade():
    op.drop_index("ix_content_entries_status", table_name="content_entries")
    op.drop_index("ix_content_entries_updated_at", table_name="content_entries")
    op.drop_index("ix_content_entries_page_section", table_name="content_entries")
    op.drop_index("ix_content_entries_key_locale_active", table_name="content_entries")
    op.drop_table("content_entries")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
