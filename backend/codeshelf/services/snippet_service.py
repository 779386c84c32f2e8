"""
CodeShelf Backend — Snippet Service (Snippet Store)
=====================================================

What:  List / get / create / update / delete for snippets.
How:   Builds SQLAlchemy statements from a SnippetFilter, validates payloads
       with services.validation, and flushes through the request's session.
       The commit happens in get_db_session once the handler returns.
Who:   Called by route handlers in routes/snippets.py.

Design:
    SnippetService is stateless — it receives the db session for each call,
    so tests can pass any AsyncSession and each request keeps its own
    transaction.

Error Handling:
    - Unknown id             → NotFoundError
    - Bad payload            → ValidationError (from services.validation or
                               the model's field validators)
    - SQLAlchemy failure     → StoreError, original exception chained
"""

import logging
from typing import Any, List, Mapping

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from codeshelf.exceptions import NotFoundError, StoreError
from codeshelf.models.snippet import Snippet
from codeshelf.services.query import SnippetFilter
from codeshelf.services.validation import validate_create, validate_update

logger = logging.getLogger(__name__)


class SnippetService:
    """
    Business logic layer for snippet operations.

    Responsibilities:
        - list_snippets():  filtered listing, newest first
        - get_snippet():    single snippet with not-found handling
        - create_snippet(): validate, normalize, insert
        - update_snippet(): partial update of supplied fields only
        - delete_snippet(): hard delete
    """

    async def list_snippets(
        self,
        db: AsyncSession,
        snippet_filter: SnippetFilter | None = None,
    ) -> List[Snippet]:
        """
        Return snippets matching `snippet_filter`, newest first.

        Query plan (both terms present):
            SELECT * FROM snippets
            WHERE (lower(title) LIKE :s OR lower(code) LIKE :s)
              AND lower(language) LIKE :l
            ORDER BY created_at DESC, id DESC
        """
        snippet_filter = snippet_filter or SnippetFilter()
        query = (
            select(Snippet)
            .where(*snippet_filter.where_clauses(Snippet))
            # id breaks ties between equal timestamps
            .order_by(Snippet.created_at.desc(), Snippet.id.desc())
        )
        try:
            result = await db.execute(query)
            snippets = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing snippets: %s", str(e), exc_info=True)
            raise StoreError(
                message="Could not retrieve snippets. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.debug(
            "Listed %d snippets (search=%r, language=%r)",
            len(snippets),
            snippet_filter.search,
            snippet_filter.language,
        )
        return snippets

    async def get_snippet(self, db: AsyncSession, snippet_id: str) -> Snippet:
        """
        Fetch one snippet by id.

        Raises:
            NotFoundError: no snippet has this id
            StoreError:    query execution failed
        """
        try:
            snippet = await db.get(Snippet, snippet_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching snippet %s: %s", snippet_id, str(e))
            raise StoreError(
                message="Could not retrieve the snippet. Please try again.",
                context={"snippet_id": snippet_id},
            ) from e

        if snippet is None:
            raise NotFoundError(resource="Snippet", resource_id=snippet_id)
        return snippet

    async def create_snippet(self, db: AsyncSession, payload: Mapping[str, Any]) -> Snippet:
        """
        Create a snippet from {title, language, code}.

        Title and code are stored trimmed, language trimmed and lowercased.
        The id and created_at are assigned here and never change afterwards.

        Raises:
            ValidationError: a field is missing/blank or the title is too long
            StoreError:      the insert failed
        """
        fields = validate_create(payload)
        snippet = Snippet(**fields)
        db.add(snippet)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating snippet: %s", str(e), exc_info=True)
            raise StoreError(
                message="Could not save the snippet. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Snippet %s created (language=%s)", snippet.id, snippet.language)
        return snippet

    async def update_snippet(
        self,
        db: AsyncSession,
        snippet_id: str,
        payload: Mapping[str, Any],
    ) -> Snippet:
        """
        Apply the supplied fields of `payload` to an existing snippet.

        Unsupplied (or null) fields keep their stored values. Each assignment
        passes through the model's field validators again before the flush.

        Raises:
            NotFoundError:   no snippet has this id (store left unchanged)
            ValidationError: a supplied field breaks a field rule
            StoreError:      the update failed
        """
        snippet = await self.get_snippet(db, snippet_id)
        changes = validate_update(payload)

        for field, value in changes.items():
            setattr(snippet, field, value)

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating snippet %s: %s", snippet_id, str(e))
            raise StoreError(
                message="Could not update the snippet. Please try again.",
                context={"snippet_id": snippet_id},
            ) from e

        logger.info("Snippet %s updated (fields=%s)", snippet_id, sorted(changes))
        return snippet

    async def delete_snippet(self, db: AsyncSession, snippet_id: str) -> None:
        """
        Permanently remove a snippet.

        Raises:
            NotFoundError: no snippet has this id
            StoreError:    the delete failed
        """
        snippet = await self.get_snippet(db, snippet_id)
        try:
            await db.delete(snippet)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting snippet %s: %s", snippet_id, str(e))
            raise StoreError(
                message="Could not delete the snippet. Please try again.",
                context={"snippet_id": snippet_id},
            ) from e

        logger.info("Snippet %s deleted", snippet_id)


# ── Singleton Instance ────────────────────────────────────────────────────
snippet_service = SnippetService()
