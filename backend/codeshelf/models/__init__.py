"""ORM models. Importing this package registers every table with Base.metadata."""

from codeshelf.models.snippet import Snippet

__all__ = ["Snippet"]
