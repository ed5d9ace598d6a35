"""Base session index interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from sessionpurge.core.logging import ContextualLogger
from sessionpurge.core.logging import logger as default_logger


class SessionIndex(ABC):
    """Search index holding one document per session, keyed by session id."""

    def __init__(self):
        """Initialize the base index."""
        self._logger: Optional[ContextualLogger] = None

    @property
    def logger(self) -> ContextualLogger:
        """Get the logger for this index, falling back to the default."""
        if self._logger is not None:
            return self._logger
        return default_logger

    def set_logger(self, logger: ContextualLogger) -> None:
        """Set a contextual logger for this index."""
        self._logger = logger

    @abstractmethod
    async def search_ids(
        self,
        project_id: int,
        query: Dict[str, Any],
        max_results: int,
        search_after: Optional[int] = None,
    ) -> List[int]:
        """Return matching session ids, ascending, strictly greater than ``search_after``.

        Args:
            project_id: Project scope of the search
            query: Canonical filter selecting sessions
            max_results: Page size cap
            search_after: Cursor; the highest id of the previous page

        Returns:
            At most ``max_results`` session ids in ascending order

        Raises:
            SearchIndexError: If the query fails
        """
        pass

    @abstractmethod
    async def delete(self, session_id: int) -> None:
        """Delete the document of a session. Deleting a missing document succeeds.

        Args:
            session_id: Session id

        Raises:
            SearchIndexError: If the delete fails
        """
        pass

    async def close_connection(self) -> None:
        """Release the underlying client."""
        pass
