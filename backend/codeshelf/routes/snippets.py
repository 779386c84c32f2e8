"""
CodeShelf Backend — Snippet Route Handlers
============================================

What:  HTTP surface for snippets.
How:   Extracts query parameters / bodies, delegates to SnippetService,
       wraps the result in the response schema. Errors propagate to the
       global exception handlers registered in main.py.

Route Inventory:
    GET    /api/snippets?search=&language=   list (newest first)
    GET    /api/snippets/{snippet_id}        single snippet
    POST   /api/snippets                     create → 201 {snippet}
    PUT    /api/snippets/{snippet_id}        partial update → 200 snippet
    DELETE /api/snippets/{snippet_id}        delete → 200 {message}
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from codeshelf.database import get_db_session
from codeshelf.schemas.snippet import (
    ErrorResponse,
    MessageResponse,
    SnippetCreate,
    SnippetCreatedResponse,
    SnippetListResponse,
    SnippetResponse,
    SnippetUpdate,
)
from codeshelf.services.query import SnippetFilter
from codeshelf.services.snippet_service import snippet_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/snippets", tags=["Snippets"])

_NOT_FOUND = {404: {"description": "Snippet not found", "model": ErrorResponse}}
_INVALID = {400: {"description": "Invalid snippet fields", "model": ErrorResponse}}


@router.get(
    "",
    response_model=SnippetListResponse,
    summary="List snippets",
    description=(
        "Returns all snippets, newest first. `search` matches title or code and "
        "`language` matches the language tag; both are case-insensitive substring "
        "matches and combine with AND."
    ),
)
async def list_snippets(
    search: Optional[str] = Query(
        default=None,
        description="Case-insensitive substring of the title or the code",
    ),
    language: Optional[str] = Query(
        default=None,
        description="Case-insensitive substring of the language (e.g. 'java' matches 'javascript')",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> SnippetListResponse:
    snippets = await snippet_service.list_snippets(
        db, SnippetFilter(search=search, language=language)
    )
    return SnippetListResponse(
        snippets=[SnippetResponse.model_validate(s) for s in snippets],
        count=len(snippets),
    )


@router.get(
    "/{snippet_id}",
    response_model=SnippetResponse,
    responses=_NOT_FOUND,
    summary="Get a single snippet",
)
async def get_snippet(
    snippet_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> SnippetResponse:
    snippet = await snippet_service.get_snippet(db, snippet_id)
    return SnippetResponse.model_validate(snippet)


@router.post(
    "",
    status_code=201,
    response_model=SnippetCreatedResponse,
    responses=_INVALID,
    summary="Create a snippet",
    description=(
        "Title, language and code are required and trimmed; the language is stored "
        "lowercase and the title may be at most 100 characters. A 400 response "
        "carries a `missing` map naming the absent fields."
    ),
)
async def create_snippet(
    body: Optional[SnippetCreate] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> SnippetCreatedResponse:
    # An empty body is reported through the missing map like an empty object
    payload = body.model_dump() if body is not None else {}
    snippet = await snippet_service.create_snippet(db, payload)
    return SnippetCreatedResponse(snippet=SnippetResponse.model_validate(snippet))


@router.put(
    "/{snippet_id}",
    response_model=SnippetResponse,
    responses={**_NOT_FOUND, **_INVALID},
    summary="Update a snippet",
    description="Only the supplied fields change; the id and createdAt never do.",
)
async def update_snippet(
    snippet_id: str,
    body: SnippetUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> SnippetResponse:
    snippet = await snippet_service.update_snippet(
        db, snippet_id, body.model_dump(exclude_unset=True)
    )
    return SnippetResponse.model_validate(snippet)


@router.delete(
    "/{snippet_id}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
    summary="Delete a snippet",
)
async def delete_snippet(
    snippet_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await snippet_service.delete_snippet(db, snippet_id)
    return MessageResponse(message="Snippet removed")
