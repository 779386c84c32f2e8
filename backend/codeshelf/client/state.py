"""
CodeShelf Client — Sync State and Reducer
===========================================

What:  The client's snippet cache, held as explicit state.
How:   `SyncState` is immutable. Every change is an action passed to the
       pure `reduce(state, action)` function; `SyncStore` keeps the current
       state and notifies subscribers after each dispatch.

State transitions (per fetch):
    idle → loading → populated   (FetchSucceeded)
                   → failed      (FetchFailed)

    Each fetch carries an increasing `request_id`. Only the latest fetch may
    settle the state; results for superseded fetches are dropped.

Writes:
    SnippetCreated  prepend (the server orders newest first)
    SnippetUpdated  replace in place, order unchanged
    SnippetDeleted  remove
    WriteFailed     set `error`; the snippet list is left untouched
"""

import logging
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from codeshelf.schemas.snippet import SnippetResponse
from codeshelf.services.query import SnippetFilter

logger = logging.getLogger(__name__)


class SyncStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    POPULATED = "populated"
    FAILED = "failed"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class SyncState(BaseModel):
    model_config = ConfigDict(frozen=True)

    snippets: Tuple[SnippetResponse, ...] = ()
    status: SyncStatus = SyncStatus.IDLE
    error: Optional[str] = None
    # Local re-filter applied on top of the fetched list
    local_filter: SnippetFilter = SnippetFilter()
    theme: Theme = Theme.LIGHT
    # Highest fetch id issued so far
    latest_request: int = 0


# ══════════════════════════════════════════════════════════════════════════
# Actions
# ══════════════════════════════════════════════════════════════════════════


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)


class FetchStarted(_Action):
    request_id: int


class FetchSucceeded(_Action):
    request_id: int
    snippets: Tuple[SnippetResponse, ...]


class FetchFailed(_Action):
    request_id: int
    error: str


class SnippetCreated(_Action):
    snippet: SnippetResponse


class SnippetUpdated(_Action):
    snippet: SnippetResponse


class SnippetDeleted(_Action):
    snippet_id: str


class WriteFailed(_Action):
    error: str


class ErrorDismissed(_Action):
    pass


class LocalFilterChanged(_Action):
    local_filter: SnippetFilter


class ThemeToggled(_Action):
    pass


Action = Union[
    FetchStarted,
    FetchSucceeded,
    FetchFailed,
    SnippetCreated,
    SnippetUpdated,
    SnippetDeleted,
    WriteFailed,
    ErrorDismissed,
    LocalFilterChanged,
    ThemeToggled,
]


# ══════════════════════════════════════════════════════════════════════════
# Reducer
# ══════════════════════════════════════════════════════════════════════════


def reduce(state: SyncState, action: Action) -> SyncState:
    """Return the state that follows `state` after `action`."""
    if isinstance(action, FetchStarted):
        return state.model_copy(
            update={
                "status": SyncStatus.LOADING,
                "error": None,
                "latest_request": max(state.latest_request, action.request_id),
            }
        )

    if isinstance(action, FetchSucceeded):
        if action.request_id != state.latest_request:
            logger.debug("Dropping stale fetch %d (latest %d)", action.request_id, state.latest_request)
            return state
        return state.model_copy(
            update={"snippets": action.snippets, "status": SyncStatus.POPULATED, "error": None}
        )

    if isinstance(action, FetchFailed):
        if action.request_id != state.latest_request:
            return state
        return state.model_copy(update={"status": SyncStatus.FAILED, "error": action.error})

    if isinstance(action, SnippetCreated):
        remaining = tuple(s for s in state.snippets if s.id != action.snippet.id)
        return state.model_copy(update={"snippets": (action.snippet,) + remaining, "error": None})

    if isinstance(action, SnippetUpdated):
        snippets = tuple(
            action.snippet if s.id == action.snippet.id else s for s in state.snippets
        )
        return state.model_copy(update={"snippets": snippets, "error": None})

    if isinstance(action, SnippetDeleted):
        snippets = tuple(s for s in state.snippets if s.id != action.snippet_id)
        return state.model_copy(update={"snippets": snippets, "error": None})

    if isinstance(action, WriteFailed):
        return state.model_copy(update={"error": action.error})

    if isinstance(action, ErrorDismissed):
        return state.model_copy(update={"error": None})

    if isinstance(action, LocalFilterChanged):
        return state.model_copy(update={"local_filter": action.local_filter})

    if isinstance(action, ThemeToggled):
        theme = Theme.DARK if state.theme is Theme.LIGHT else Theme.LIGHT
        return state.model_copy(update={"theme": theme})

    raise TypeError(f"Unknown action: {type(action).__name__}")


def visible_snippets(state: SyncState) -> List[SnippetResponse]:
    """The cached snippets that pass the local filter, in cache order."""
    return [s for s in state.snippets if state.local_filter.matches(s)]


# ══════════════════════════════════════════════════════════════════════════
# Store
# ══════════════════════════════════════════════════════════════════════════

Listener = Callable[[SyncState], None]


class SyncStore:
    """
    Holds the current SyncState and applies actions through `reduce`.

    Listeners receive the new state after every dispatch; `subscribe`
    returns a callable that removes the listener.
    """

    def __init__(self, initial: Optional[SyncState] = None):
        self._state = initial or SyncState()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> SyncState:
        return self._state

    def dispatch(self, action: Action) -> SyncState:
        self._state = reduce(self._state, action)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
