"""create relay tables and seed catalog

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from app.constants.catalog import DEFAULT_LABELS, DEFAULT_QUICK_REPLIES

revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
    )


def upgrade() -> None:
    """Create customers, catalog, thread, mapping, pending and ledger tables."""
    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("external_user_id", sa.String(length=255), nullable=False),
        sa.Column("page_id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("avatar", sa.Text(), nullable=True),
        _created_at(),
        sa.Column(
            "updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint(
            "external_user_id", "page_id", name="uq_customers_external_user_page"
        ),
    )

    labels = op.create_table(
        "labels",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=100), nullable=False, unique=True),
        sa.Column("emoji", sa.String(length=10), nullable=True),
        sa.Column("color", sa.String(length=20), nullable=True),
        _created_at(),
    )

    op.create_table(
        "customer_labels",
        sa.Column(
            "customer_id",
            sa.Integer(),
            sa.ForeignKey("customers.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "label_id",
            sa.Integer(),
            sa.ForeignKey("labels.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "added_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
    )

    quick_replies = op.create_table(
        "quick_replies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("key", sa.String(length=100), nullable=False, unique=True),
        sa.Column("emoji", sa.String(length=10), nullable=True),
        sa.Column("text_vi", sa.Text(), nullable=False),
        sa.Column("text_en", sa.Text(), nullable=False),
        _created_at(),
    )

    op.create_table(
        "conversation_threads",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "customer_id",
            sa.Integer(),
            sa.ForeignKey("customers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("page_id", sa.String(length=255), nullable=False),
        sa.Column("anchor_message_id", sa.String(length=64), nullable=False),
        _created_at(),
    )
    op.create_index(
        "ix_conversation_threads_customer_page_created",
        "conversation_threads",
        ["customer_id", "page_id", "created_at"],
        unique=False,
    )

    op.create_table(
        "message_mappings",
        sa.Column("operator_message_id", sa.String(length=64), primary_key=True),
        sa.Column("page_id", sa.String(length=255), nullable=False),
        sa.Column("external_user_id", sa.String(length=255), nullable=False),
        sa.Column(
            "customer_id",
            sa.Integer(),
            sa.ForeignKey("customers.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("detected_language", sa.String(length=10), nullable=True),
        _created_at(),
    )

    op.create_table(
        "pending_replies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("confirm_token", sa.String(length=128), nullable=False),
        sa.Column("page_id", sa.String(length=255), nullable=False),
        sa.Column("external_user_id", sa.String(length=255), nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=True),
        sa.Column("original_text", sa.Text(), nullable=False),
        sa.Column("translated_text", sa.Text(), nullable=False),
        sa.Column(
            "status", sa.String(length=16), nullable=False, server_default="pending"
        ),
        _created_at(),
    )
    op.create_index(
        "ix_pending_replies_confirm_token",
        "pending_replies",
        ["confirm_token"],
        unique=True,
    )

    op.create_table(
        "message_ledger",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "customer_id",
            sa.Integer(),
            sa.ForeignKey("customers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sender_role", sa.String(length=16), nullable=False),
        sa.Column("text", sa.Text(), nullable=True),
        sa.Column("media_kind", sa.String(length=32), nullable=True),
        sa.Column("media_ref", sa.Text(), nullable=True),
        sa.Column("translated_text", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index(
        "ix_message_ledger_customer_created",
        "message_ledger",
        ["customer_id", "created_at"],
        unique=False,
    )

    op.bulk_insert(labels, DEFAULT_LABELS)
    op.bulk_insert(quick_replies, DEFAULT_QUICK_REPLIES)


def downgrade() -> None:
    op.drop_index("ix_message_ledger_customer_created", table_name="message_ledger")
    op.drop_table("message_ledger")
    op.drop_index("ix_pending_replies_confirm_token", table_name="pending_replies")
    op.drop_table("pending_replies")
    op.drop_table("message_mappings")
    op.drop_index(
        "ix_conversation_threads_customer_page_created",
        table_name="conversation_threads",
    )
    op.drop_table("conversation_threads")
    op.drop_table("quick_replies")
    op.drop_table("customer_labels")
    op.drop_table("labels")
    op.drop_table("customers")
