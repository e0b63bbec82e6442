"""Initial schema - messages table with pgvector embeddings.

Revision ID: 001
Revises:
Create Date: 2026-10-16

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from pgvector.sqlalchemy import Vector
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS vector")

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("channel_name", sa.String(255), nullable=False),
        sa.Column("thread_ts", sa.String(50), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("user_name", sa.String(255), nullable=True),
        sa.Column("user_title", sa.String(255), nullable=True),
        sa.Column("chunk_index", sa.Integer(), nullable=False),
        sa.Column("metadata", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("embedding", Vector(1536), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_messages_channel_thread", "messages", ["channel_name", "thread_ts"])
    op.create_index(
        "ux_messages_channel_thread_chunk",
        "messages",
        ["channel_name", "thread_ts", "chunk_index"],
        unique=True,
    )
    op.execute(
        "CREATE INDEX ix_messages_embedding ON messages "
        "USING ivfflat (embedding vector_cosine_ops) WITH (lists = 100)"
    )


def downgrade() -> None:
    op.drop_index("ix_messages_embedding", table_name="messages")
    op.drop_index("ux_messages_channel_thread_chunk", table_name="messages")
    op.drop_index("ix_messages_channel_thread", table_name="messages")
    op.drop_table("messages")
    op.execute("DROP EXTENSION IF EXISTS vector")
