"""
CodeShelf Client — Snippet Sync Controller
============================================

What:  Connects SnippetAPI calls to SyncStore actions.
How:   Each operation calls the server and dispatches the matching action.
       The store is only changed with data from a successful response; a
       failed write dispatches WriteFailed and re-raises the error.

Typical UI flow:
    sync = SnippetSync(SnippetAPI("http://localhost:5000"))
    await sync.refresh()                       # initial load, server filters
    sync.set_local_filter(search="sort")       # instant, no round trip
    await sync.create({"title": ..., "language": ..., "code": ...})
    for snippet in sync.visible(): ...
"""

import itertools
import logging
from typing import Any, List, Mapping, Optional

from codeshelf.client.api import SnippetAPI
from codeshelf.client.state import (
    ErrorDismissed,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    LocalFilterChanged,
    SnippetCreated,
    SnippetDeleted,
    SnippetUpdated,
    SyncState,
    SyncStore,
    ThemeToggled,
    WriteFailed,
    visible_snippets,
)
from codeshelf.exceptions import CodeShelfError
from codeshelf.schemas.snippet import SnippetResponse
from codeshelf.services.query import SnippetFilter

logger = logging.getLogger(__name__)


class SnippetSync:
    """Keeps a SyncStore consistent with the server after every call."""

    def __init__(self, api: SnippetAPI, store: Optional[SyncStore] = None):
        self.api = api
        self.store = store or SyncStore()
        self._request_ids = itertools.count(self.store.state.latest_request + 1)

    @property
    def state(self) -> SyncState:
        return self.store.state

    def visible(self) -> List[SnippetResponse]:
        return visible_snippets(self.store.state)

    # ── Reads ─────────────────────────────────────────────────────────────

    async def refresh(
        self,
        search: Optional[str] = None,
        language: Optional[str] = None,
    ) -> SyncState:
        """
        Fetch the list from the server with server-side filters.

        Errors are recorded in the state rather than raised; a response
        that arrives after a newer refresh started is ignored.
        """
        request_id = next(self._request_ids)
        self.store.dispatch(FetchStarted(request_id=request_id))
        try:
            snippets = await self.api.list_snippets(search=search, language=language)
        except CodeShelfError as e:
            logger.warning("Snippet fetch %d failed: %s", request_id, e.message)
            return self.store.dispatch(FetchFailed(request_id=request_id, error=e.message))
        return self.store.dispatch(
            FetchSucceeded(request_id=request_id, snippets=tuple(snippets))
        )

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(self, fields: Mapping[str, Any]) -> SnippetResponse:
        try:
            snippet = await self.api.create_snippet(fields)
        except CodeShelfError as e:
            self.store.dispatch(WriteFailed(error=e.message))
            raise
        self.store.dispatch(SnippetCreated(snippet=snippet))
        return snippet

    async def update(self, snippet_id: str, fields: Mapping[str, Any]) -> SnippetResponse:
        try:
            snippet = await self.api.update_snippet(snippet_id, fields)
        except CodeShelfError as e:
            self.store.dispatch(WriteFailed(error=e.message))
            raise
        self.store.dispatch(SnippetUpdated(snippet=snippet))
        return snippet

    async def delete(self, snippet_id: str) -> None:
        try:
            await self.api.delete_snippet(snippet_id)
        except CodeShelfError as e:
            self.store.dispatch(WriteFailed(error=e.message))
            raise
        self.store.dispatch(SnippetDeleted(snippet_id=snippet_id))

    # ── Local UI state ────────────────────────────────────────────────────

    def set_local_filter(
        self,
        search: Optional[str] = None,
        language: Optional[str] = None,
    ) -> SyncState:
        return self.store.dispatch(
            LocalFilterChanged(local_filter=SnippetFilter(search=search, language=language))
        )

    def dismiss_error(self) -> SyncState:
        return self.store.dispatch(ErrorDismissed())

    def toggle_theme(self) -> SyncState:
        return self.store.dispatch(ThemeToggled())
