"""
CodeShelf — Snippet List Predicate
====================================

What:  The search/language filter applied when listing snippets.
How:   `SnippetFilter` holds the two optional terms and renders them two
       ways from one field map:
         - where_clauses(Model): SQLAlchemy expressions for the server query
         - matches(snippet):     in-memory check for the client cache
Who:   SnippetService.list_snippets (server) and codeshelf.client.state
       (local re-filtering).

Matching rules:
    search    case-insensitive substring of title OR code
    language  case-insensitive substring of language ("java" ⊂ "javascript")
    both      AND
    neither   everything matches

    Terms are trimmed; an empty or whitespace-only term is ignored.
    SQL LIKE wildcards in a term are escaped, so `%` and `_` match literally,
    the same way `str.__contains__` treats them.
"""

from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy import ColumnElement, or_

# Term name → snippet attributes it is matched against (OR within a term,
# AND across terms)
FILTER_FIELDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("search", ("title", "code")),
    ("language", ("language",)),
)


class SnippetFilter(BaseModel):
    """Optional search/language terms for listing snippets."""

    model_config = ConfigDict(frozen=True)

    search: Optional[str] = None
    language: Optional[str] = None

    @field_validator("search", "language", mode="before")
    @classmethod
    def _blank_is_absent(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @property
    def is_empty(self) -> bool:
        return self.search is None and self.language is None

    def _terms(self):
        for term_name, attributes in FILTER_FIELDS:
            term = getattr(self, term_name)
            if term is not None:
                yield term, attributes

    def matches(self, snippet: Any) -> bool:
        """
        True when `snippet` (anything with title/language/code attributes)
        satisfies every present term.
        """
        for term, attributes in self._terms():
            needle = term.lower()
            if not any(needle in (getattr(snippet, attr) or "").lower() for attr in attributes):
                return False
        return True

    def where_clauses(self, model: Any) -> List[ColumnElement[bool]]:
        """
        SQL conditions for `model`, to be passed to `select(...).where(*clauses)`.

        `icontains` renders `lower(col) LIKE '%' || lower(:term) || '%'`,
        which is the SQL form of `matches`.
        """
        return [
            or_(*(getattr(model, attr).icontains(term, autoescape=True) for attr in attributes))
            for term, attributes in self._terms()
        ]
