"""
CodeShelf Backend — Snippet SQLAlchemy Model
==============================================

What:  ORM model representing the `snippets` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads it for migrations.
Who:   Used by SnippetService for CRUD operations.

Table Design:
    - id: UUID4 text generated in Python; opaque to clients, never reused
    - title / language / code: normalized by the field validators below on
      every assignment (create and update alike)
    - created_at: UTC, set once on insert, the only sort key

    Index on created_at DESC serves the one list ordering (newest first).
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from codeshelf.database import Base
from codeshelf.exceptions import ValidationError
from codeshelf.services.validation import TITLE_MAX_LENGTH, normalize_field


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Snippet(Base):
    """
    A stored piece of code with a title and a language tag.

    Query Patterns:
        - List: SELECT ... [WHERE lower(title) LIKE ... ] ORDER BY created_at DESC
        - Get / update / delete: SELECT ... WHERE id = :id (primary key)
    """

    __tablename__ = "snippets"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=_new_id,
        comment="Opaque snippet identifier (UUID4 text)",
    )

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
        comment="Trimmed title, at most 100 characters",
    )

    language: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Trimmed, lowercased language tag",
    )

    code: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Trimmed snippet body",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        comment="When this snippet was created (UTC)",
    )

    __table_args__ = (
        Index("idx_snippets_created_at", created_at.desc()),
    )

    @validates("title", "language", "code")
    def _normalize(self, key: str, value: str) -> str:
        # Store-level constraint: runs for the constructor and for every
        # attribute assignment in update_snippet
        return normalize_field(key, value)

    @validates("created_at")
    def _freeze_created_at(self, key: str, value: datetime) -> datetime:
        # Settable once (constructor or column default), never changed after
        current = self.__dict__.get("created_at")
        if current is not None and value != current:
            raise ValidationError(message="createdAt cannot be changed", field="created_at")
        return value

    def __repr__(self) -> str:
        return (
            f"<Snippet(id={self.id}, language='{self.language}', "
            f"created_at='{self.created_at}')>"
        )
