"""Create snippets table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `snippets` table and its created_at DESC index.
Rollback: downgrade() drops the table (all snippets are lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "snippets",
        sa.Column(
            "id",
            sa.String(36),
            nullable=False,
            comment="Opaque snippet identifier (UUID4 text)",
        ),
        sa.Column(
            "title",
            sa.String(100),
            nullable=False,
            comment="Trimmed title, at most 100 characters",
        ),
        sa.Column(
            "language",
            sa.Text(),
            nullable=False,
            comment="Trimmed, lowercased language tag",
        ),
        sa.Column(
            "code",
            sa.Text(),
            nullable=False,
            comment="Trimmed snippet body",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this snippet was created (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(
        "idx_snippets_created_at",
        "snippets",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_snippets_created_at", table_name="snippets")
    op.drop_table("snippets")
