"""create contacts, chat messages, embedding, platform, prompt and broadcast tables

Revision ID: 4f1c2a9d7e30
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from pgvector.sqlalchemy import Vector
from sqlalchemy.dialects import postgresql

revision: str = "4f1c2a9d7e30"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

EMBEDDING_DIMENSIONS = 1536


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")
        ),
        sa.Column(
            "updated_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")
        ),
    ]


def upgrade() -> None:
    """Create every table of the service; enable pgvector."""
    op.execute("CREATE EXTENSION IF NOT EXISTS vector")

    op.create_table(
        "contacts",
        _id(),
        sa.Column("code", sa.String(length=32), nullable=False),
        sa.Column("channel", sa.String(length=32), nullable=False),
        sa.Column("channel_id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column(
            "contact_status",
            sa.String(length=32),
            nullable=False,
            server_default="Leads",
        ),
        sa.Column(
            "temperature", sa.String(length=16), nullable=False, server_default="Warm"
        ),
        sa.Column("first_contact_at", sa.DateTime(), nullable=True),
        sa.Column("last_contact_at", sa.DateTime(), nullable=True),
        sa.Column("last_agent", sa.String(length=255), nullable=True),
        sa.Column("last_agent_type", sa.String(length=16), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint(
            "channel", "channel_id", name="uq_contacts_channel_channel_id"
        ),
    )
    op.create_index("ix_contacts_code", "contacts", ["code"], unique=True)
    op.create_index("ix_contacts_channel", "contacts", ["channel"], unique=False)

    op.create_table(
        "chat_messages",
        _id(),
        sa.Column("contact_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("contact_name", sa.String(length=255), nullable=True),
        sa.Column("message", sa.Text(), nullable=False, server_default=""),
        sa.Column("response", sa.Text(), nullable=True),
        sa.Column("channel", sa.String(length=32), nullable=False),
        sa.Column(
            "status",
            sa.String(length=32),
            nullable=False,
            server_default="Unassigned",
        ),
        sa.Column("assigned_to", sa.String(length=255), nullable=True),
        sa.Column("assigned_agent", sa.String(length=255), nullable=True),
        sa.Column("labels", sa.Text(), nullable=True),
        sa.Column("tokens_used", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["contact_id"], ["contacts.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_chat_messages_contact_id", "chat_messages", ["contact_id"])
    op.create_index("ix_chat_messages_channel", "chat_messages", ["channel"])
    op.create_index("ix_chat_messages_status", "chat_messages", ["status"])

    op.create_table(
        "knowledge_entries",
        _id(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("source", sa.String(length=255), nullable=True),
        sa.Column("embedding", Vector(EMBEDDING_DIMENSIONS), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_knowledge_entries_category", "knowledge_entries", ["category"])
    op.create_index("ix_knowledge_entries_active", "knowledge_entries", ["active"])

    op.create_table(
        "faq_entries",
        _id(),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("embedding", Vector(EMBEDDING_DIMENSIONS), nullable=False),
        sa.Column("hit_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_faq_entries_category", "faq_entries", ["category"])
    op.create_index("ix_faq_entries_active", "faq_entries", ["active"])

    op.create_table(
        "product_embeddings",
        _id(),
        sa.Column("product_id", sa.String(length=64), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("features", sa.Text(), nullable=False, server_default=""),
        sa.Column("use_cases", sa.Text(), nullable=False, server_default=""),
        sa.Column("embedding", Vector(EMBEDDING_DIMENSIONS), nullable=False),
        *_timestamps(),
    )
    op.create_index(
        "ix_product_embeddings_product_id", "product_embeddings", ["product_id"]
    )

    op.create_table(
        "chat_history_entries",
        _id(),
        sa.Column("contact_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_message", sa.Text(), nullable=False),
        sa.Column("ai_response", sa.Text(), nullable=False),
        sa.Column("message_embedding", Vector(EMBEDDING_DIMENSIONS), nullable=False),
        sa.Column("response_embedding", Vector(EMBEDDING_DIMENSIONS), nullable=False),
        sa.Column("sentiment", sa.String(length=32), nullable=True),
        sa.Column("intent", sa.String(length=64), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["contact_id"], ["contacts.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_chat_history_entries_contact_id", "chat_history_entries", ["contact_id"]
    )

    # Cosine distance indexes for the <=> operator
    for table, column in (
        ("knowledge_entries", "embedding"),
        ("faq_entries", "embedding"),
        ("product_embeddings", "embedding"),
        ("chat_history_entries", "message_embedding"),
    ):
        op.execute(
            f"CREATE INDEX ix_{table}_{column}_hnsw ON {table} "
            f"USING hnsw ({column} vector_cosine_ops)"
        )

    op.create_table(
        "connected_platforms",
        _id(),
        sa.Column("platform", sa.String(length=32), nullable=False),
        sa.Column("platform_id", sa.String(length=255), nullable=True),
        sa.Column("phone_number_id", sa.String(length=255), nullable=True),
        sa.Column("page_id", sa.String(length=255), nullable=True),
        sa.Column("encrypted_token", sa.LargeBinary(), nullable=True),
        sa.Column("webhook_url", sa.String(length=512), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index(
        "ix_connected_platforms_platform",
        "connected_platforms",
        ["platform"],
        unique=True,
    )

    # system_prompts first without current_version_id (circular FK)
    op.create_table(
        "system_prompts",
        _id(),
        sa.Column("name", sa.String(length=64), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_system_prompts_name", "system_prompts", ["name"], unique=True)

    op.create_table(
        "system_prompt_versions",
        _id(),
        sa.Column("system_prompt_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("version_number", sa.Integer(), nullable=False),
        sa.Column("note", sa.String(length=512), nullable=True),
        sa.Column("created_by", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["system_prompt_id"], ["system_prompts.id"], ondelete="CASCADE"
        ),
        sa.UniqueConstraint(
            "system_prompt_id", "version_number", name="uq_system_prompt_version"
        ),
    )

    op.add_column(
        "system_prompts",
        sa.Column("current_version_id", postgresql.UUID(as_uuid=True), nullable=True),
    )
    op.create_foreign_key(
        "fk_system_prompts_current_version_id",
        "system_prompts",
        "system_prompt_versions",
        ["current_version_id"],
        ["id"],
        ondelete="SET NULL",
    )

    op.create_table(
        "broadcast_histories",
        _id(),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("channel", sa.String(length=32), nullable=False, server_default="All"),
        sa.Column("sent_to", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("successful", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("failed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "status", sa.String(length=32), nullable=False, server_default="Pending"
        ),
        sa.Column("sent_by", sa.String(length=255), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        *_timestamps(),
    )


def downgrade() -> None:
    """Drop every table of the service."""
    op.drop_table("broadcast_histories")
    op.drop_constraint(
        "fk_system_prompts_current_version_id",
        "system_prompts",
        type_="foreignkey",
    )
    op.drop_column("system_prompts", "current_version_id")
    op.drop_table("system_prompt_versions")
    op.drop_index("ix_system_prompts_name", table_name="system_prompts")
    op.drop_table("system_prompts")
    op.drop_index("ix_connected_platforms_platform", table_name="connected_platforms")
    op.drop_table("connected_platforms")
    op.drop_table("chat_history_entries")
    op.drop_table("product_embeddings")
    op.drop_table("faq_entries")
    op.drop_table("knowledge_entries")
    op.drop_table("chat_messages")
    op.drop_index("ix_contacts_channel", table_name="contacts")
    op.drop_index("ix_contacts_code", table_name="contacts")
    op.drop_table("contacts")
