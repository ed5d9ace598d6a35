"""Session search index."""

from sessionpurge.platform.index._base import SessionIndex
from sessionpurge.platform.index.exceptions import SearchIndexError
from sessionpurge.platform.index.vespa import VespaSessionIndex

__all__ = [
    "SessionIndex",
    "SearchIndexError",
    "VespaSessionIndex",
]
