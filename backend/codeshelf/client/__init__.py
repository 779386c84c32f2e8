"""
CodeShelf Client — Sync Layer
===============================

What:  The client half of the snippet contract, for UIs and scripts.

    SnippetAPI   async HTTP wrapper (httpx) over /api/snippets
    SyncStore    explicit state container driven by a pure reducer
    SnippetSync  performs API calls and dispatches the resulting actions
"""

from codeshelf.client.api import SnippetAPI
from codeshelf.client.state import SyncState, SyncStatus, SyncStore, Theme, reduce, visible_snippets
from codeshelf.client.sync import SnippetSync

__all__ = [
    "SnippetAPI",
    "SnippetSync",
    "SyncState",
    "SyncStatus",
    "SyncStore",
    "Theme",
    "reduce",
    "visible_snippets",
]
