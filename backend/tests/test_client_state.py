"""
CodeShelf Client — Reducer and Store Tests
============================================

What:  State transitions of the client snippet cache.
How:   Pure reducer calls on hand-built SyncState values; no I/O.
"""

from datetime import datetime, timedelta, timezone

import pytest

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
    SyncStatus,
    SyncStore,
    Theme,
    ThemeToggled,
    WriteFailed,
    reduce,
    visible_snippets,
)
from codeshelf.schemas.snippet import SnippetResponse
from codeshelf.services.query import SnippetFilter

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def make_snippet(n, title=None, language="python", code="pass"):
    return SnippetResponse(
        id=f"id-{n}",
        title=title or f"snippet {n}",
        language=language,
        code=code,
        created_at=T0 + timedelta(minutes=n),
    )


@pytest.fixture
def populated():
    state = reduce(SyncState(), FetchStarted(request_id=1))
    return reduce(
        state,
        FetchSucceeded(request_id=1, snippets=(make_snippet(2), make_snippet(1))),
    )


class TestFetchTransitions:

    def test_initial_state(self):
        state = SyncState()
        assert state.status is SyncStatus.IDLE
        assert state.snippets == ()
        assert state.error is None
        assert state.theme is Theme.LIGHT

    def test_fetch_started_sets_loading(self):
        state = reduce(SyncState(), FetchStarted(request_id=1))
        assert state.status is SyncStatus.LOADING
        assert state.latest_request == 1

    def test_fetch_succeeded_populates(self, populated):
        assert populated.status is SyncStatus.POPULATED
        assert [s.id for s in populated.snippets] == ["id-2", "id-1"]

    def test_fetch_failed_keeps_previous_list(self, populated):
        state = reduce(populated, FetchStarted(request_id=2))
        state = reduce(state, FetchFailed(request_id=2, error="Server down"))

        assert state.status is SyncStatus.FAILED
        assert state.error == "Server down"
        assert state.snippets == populated.snippets

    def test_stale_success_is_dropped(self):
        state = reduce(SyncState(), FetchStarted(request_id=1))
        state = reduce(state, FetchStarted(request_id=2))
        state = reduce(state, FetchSucceeded(request_id=2, snippets=(make_snippet(2),)))

        after_stale = reduce(state, FetchSucceeded(request_id=1, snippets=(make_snippet(1),)))

        assert after_stale == state
        assert [s.id for s in after_stale.snippets] == ["id-2"]

    def test_stale_failure_is_dropped(self):
        state = reduce(SyncState(), FetchStarted(request_id=1))
        state = reduce(state, FetchStarted(request_id=2))

        state = reduce(state, FetchFailed(request_id=1, error="late"))

        assert state.status is SyncStatus.LOADING
        assert state.error is None


class TestWrites:

    def test_created_snippet_is_prepended(self, populated):
        state = reduce(populated, SnippetCreated(snippet=make_snippet(3)))
        assert [s.id for s in state.snippets] == ["id-3", "id-2", "id-1"]

    def test_created_snippet_is_not_duplicated(self, populated):
        state = reduce(populated, SnippetCreated(snippet=make_snippet(1, title="again")))
        assert [s.id for s in state.snippets] == ["id-1", "id-2"]

    def test_update_replaces_in_place(self, populated):
        updated = make_snippet(1, title="renamed")

        state = reduce(populated, SnippetUpdated(snippet=updated))

        assert [s.id for s in state.snippets] == ["id-2", "id-1"]
        assert state.snippets[1].title == "renamed"

    def test_delete_removes(self, populated):
        state = reduce(populated, SnippetDeleted(snippet_id="id-2"))
        assert [s.id for s in state.snippets] == ["id-1"]

    def test_write_failure_leaves_list_untouched(self, populated):
        state = reduce(populated, WriteFailed(error="Title cannot be more than 100 characters"))

        assert state.snippets == populated.snippets
        assert state.status is SyncStatus.POPULATED
        assert state.error == "Title cannot be more than 100 characters"

        assert reduce(state, ErrorDismissed()).error is None

    def test_reducer_does_not_mutate_input(self, populated):
        before = populated.snippets
        reduce(populated, SnippetDeleted(snippet_id="id-1"))
        assert populated.snippets == before


class TestLocalState:

    def test_local_filter_narrows_visible_snippets(self):
        state = SyncState(
            snippets=(
                make_snippet(1, title="Quick sort", language="python"),
                make_snippet(2, title="Fetch", language="javascript"),
                make_snippet(3, title="Hello", language="java", code="println"),
            )
        )

        state = reduce(state, LocalFilterChanged(local_filter=SnippetFilter(language="java")))
        assert [s.id for s in visible_snippets(state)] == ["id-2", "id-3"]

        state = reduce(
            state, LocalFilterChanged(local_filter=SnippetFilter(search="PRINT", language="java"))
        )
        assert [s.id for s in visible_snippets(state)] == ["id-3"]

        # The cache itself is never filtered
        assert len(state.snippets) == 3

    def test_theme_toggles(self):
        state = reduce(SyncState(), ThemeToggled())
        assert state.theme is Theme.DARK
        assert reduce(state, ThemeToggled()).theme is Theme.LIGHT

    def test_unknown_action_raises(self):
        with pytest.raises(TypeError):
            reduce(SyncState(), object())


class TestSyncStore:

    def test_dispatch_notifies_subscribers(self):
        store = SyncStore()
        seen = []
        unsubscribe = store.subscribe(seen.append)

        store.dispatch(ThemeToggled())
        unsubscribe()
        store.dispatch(ThemeToggled())

        assert [s.theme for s in seen] == [Theme.DARK]
        assert store.state.theme is Theme.LIGHT

    def test_unsubscribe_twice_is_harmless(self):
        store = SyncStore()
        unsubscribe = store.subscribe(lambda state: None)
        unsubscribe()
        unsubscribe()
        store.dispatch(ThemeToggled())
