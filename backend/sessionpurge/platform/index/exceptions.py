"""Search index exceptions."""


class SearchIndexError(Exception):
    """Raised when the session index rejects or fails a query or delete."""

    pass
