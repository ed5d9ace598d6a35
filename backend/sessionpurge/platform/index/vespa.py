"""Vespa session index.

Sessions are indexed as documents of type ``session`` (see VESPA_SESSION_SCHEMA)
whose document id is the session id.

IMPORTANT: pyvespa methods are synchronous and would block the event loop.
All pyvespa calls are wrapped in asyncio.to_thread() to maintain concurrency.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sessionpurge.core.config import settings
from sessionpurge.core.logging import ContextualLogger
from sessionpurge.core.logging import logger as default_logger
from sessionpurge.platform.index._base import SessionIndex
from sessionpurge.platform.index.exceptions import SearchIndexError

if TYPE_CHECKING:
    from vespa.application import Vespa


class VespaSessionIndex(SessionIndex):
    """Session index backed by Vespa."""

    ID_FIELD = "session_id"
    PROJECT_FIELD = "project_id"

    def __init__(self):
        """Initialize the Vespa session index."""
        super().__init__()
        self.app: Optional[Vespa] = None
        self.schema: str = settings.VESPA_SESSION_SCHEMA
        self.namespace: str = settings.VESPA_NAMESPACE

    @classmethod
    async def create(
        cls,
        app: Optional[Vespa] = None,
        logger: Optional[ContextualLogger] = None,
    ) -> "VespaSessionIndex":
        """Create and return a connected Vespa session index.

        Args:
            app: Existing pyvespa application (a new one is built from settings if None)
            logger: Logger instance

        Returns:
            Configured VespaSessionIndex instance
        """
        instance = cls()
        instance.set_logger(logger or default_logger)

        if app is None:
            from vespa.application import Vespa

            app = Vespa(url=settings.VESPA_URL, port=settings.VESPA_PORT)
            instance.logger.info(
                f"Connected to Vespa at {settings.VESPA_URL}:{settings.VESPA_PORT}"
            )
        instance.app = app

        return instance

    async def search_ids(
        self,
        project_id: int,
        query: Dict[str, Any],
        max_results: int,
        search_after: Optional[int] = None,
    ) -> List[int]:
        """Return one page of matching session ids.

        Ids are sorted ascending and strictly greater than ``search_after``, so
        repeated calls seeded with the last id of the previous page walk the full
        result set without gaps or repeats.

        Args:
            project_id: Project scope of the search
            query: Canonical filter selecting sessions
            max_results: Page size cap
            search_after: Cursor; the highest id of the previous page

        Returns:
            At most ``max_results`` session ids

        Raises:
            SearchIndexError: If the query cannot be translated, Vespa fails, or a hit
                carries no valid session id
        """
        if not self.app:
            raise RuntimeError("Vespa client not initialized. Call create() first.")

        yql = self.build_page_yql(project_id, query, max_results, search_after)
        self.logger.debug(f"[VespaSessionIndex] YQL: {yql}")

        body = {
            "yql": yql,
            "hits": max_results,
            "timeout": "30s",
        }

        try:
            response = await asyncio.to_thread(self.app.query, body=body)
        except Exception as e:
            raise SearchIndexError(f"Vespa search failed: {e}") from e

        if not response.is_successful():
            error_msg = (getattr(response, "json", None) or {}).get("root", {}).get("errors")
            raise SearchIndexError(f"Vespa search error: {error_msg or response.status_code}")

        ids = []
        for hit in response.hits or []:
            value = hit.get("fields", {}).get(self.ID_FIELD)
            ids.append(self._hit_session_id(value))
        return ids

    async def delete(self, session_id: int) -> None:
        """Delete the document of a session.

        Vespa acknowledges deletes of missing documents, so re-running is safe.

        Args:
            session_id: Session id

        Raises:
            SearchIndexError: If Vespa rejects the delete
        """
        if not self.app:
            raise RuntimeError("Vespa client not initialized. Call create() first.")

        try:
            response = await asyncio.to_thread(
                self.app.delete_data,
                schema=self.schema,
                data_id=str(session_id),
                namespace=self.namespace,
            )
        except Exception as e:
            raise SearchIndexError(f"Vespa delete failed for session {session_id}: {e}") from e

        if not response.is_successful():
            raise SearchIndexError(
                f"Vespa delete rejected for session {session_id}: "
                f"status {response.status_code}"
            )

    async def close_connection(self) -> None:
        """Close the Vespa connection."""
        if self.app:
            self.logger.debug("Closing Vespa connection")
            self.app = None

    # -------------------------------------------------------------------------
    # YQL building
    # -------------------------------------------------------------------------

    def build_page_yql(
        self,
        project_id: int,
        query: Dict[str, Any],
        max_results: int,
        search_after: Optional[int] = None,
    ) -> str:
        """Build the YQL for one ascending, cursor-scoped page.

        Args:
            project_id: Project scope
            query: Canonical filter
            max_results: Page size cap
            search_after: Exclusive lower bound on session id

        Returns:
            YQL string
        """
        clauses = [f"{self.PROJECT_FIELD} = {int(project_id)}"]

        filter_clause = self.translate_filter(query)
        if filter_clause:
            clauses.append(f"({filter_clause})")

        if search_after is not None:
            clauses.append(f"{self.ID_FIELD} > {int(search_after)}")

        return (
            f"select {self.ID_FIELD} from {self.schema} where {' and '.join(clauses)} "
            f"order by {self.ID_FIELD} asc limit {int(max_results)}"
        )

    def translate_filter(self, filter: Optional[Dict[str, Any]]) -> str:
        """Translate a canonical filter to a YQL WHERE clause.

        - must conditions -> and
        - should conditions -> or
        - must_not conditions -> !( ... and ... )
        - {"key", "match"} -> equality (numbers, booleans) or contains (strings)
        - {"key", "range"} -> comparison operators
        - {"has_id": [...]} -> session id membership

        A deletion filter is never widened: anything that cannot be translated raises.

        Args:
            filter: Canonical filter dict

        Returns:
            YQL clause ("" for an empty filter)

        Raises:
            SearchIndexError: If the filter contains an unsupported condition
        """
        if not filter:
            return ""
        if not isinstance(filter, dict):
            raise SearchIndexError(f"Unsupported filter type: {type(filter).__name__}")
        return self._build_yql_clause(filter)

    def _build_yql_clause(self, filter_dict: Dict[str, Any]) -> str:
        unknown = set(filter_dict) - {"must", "should", "must_not"}
        if unknown:
            raise SearchIndexError(f"Unsupported filter keys: {sorted(unknown)}")

        clauses = []

        if filter_dict.get("must"):
            must_clauses = [self._translate_condition(c) for c in filter_dict["must"]]
            clauses.append(f"({' and '.join(must_clauses)})")

        if filter_dict.get("should"):
            should_clauses = [self._translate_condition(c) for c in filter_dict["should"]]
            clauses.append(f"({' or '.join(should_clauses)})")

        if filter_dict.get("must_not"):
            must_not_clauses = [self._translate_condition(c) for c in filter_dict["must_not"]]
            clauses.append(f"!({' and '.join(must_not_clauses)})")

        return " and ".join(clauses)

    def _translate_condition(self, condition: Dict[str, Any]) -> str:
        # Nested filter
        if "must" in condition or "should" in condition or "must_not" in condition:
            nested = self._build_yql_clause(condition)
            if not nested:
                raise SearchIndexError("Empty nested filter")
            return nested

        if "key" in condition and "match" in condition:
            key = self._safe_key(condition["key"])
            match = condition["match"]
            value = match.get("value") if isinstance(match, dict) else match

            if isinstance(value, bool):
                return f"{key} = {str(value).lower()}"
            if isinstance(value, (int, float)):
                return f"{key} = {value}"
            if isinstance(value, str):
                return f'{key} contains "{self._escape(value)}"'
            raise SearchIndexError(f"Unsupported match value for {key}: {value!r}")

        if "key" in condition and "range" in condition:
            key = self._safe_key(condition["key"])
            operators = {"gt": ">", "gte": ">=", "lt": "<", "lte": "<="}
            parts = []
            for name, operator in operators.items():
                if name in condition["range"]:
                    bound = condition["range"][name]
                    if isinstance(bound, bool) or not isinstance(bound, (int, float)):
                        raise SearchIndexError(f"Range bound for {key} must be numeric")
                    parts.append(f"{key} {operator} {bound}")
            if not parts:
                raise SearchIndexError(f"Empty range condition for {key}")
            return " and ".join(parts)

        if "has_id" in condition:
            try:
                ids = [int(session_id) for session_id in condition["has_id"]]
            except (TypeError, ValueError) as e:
                raise SearchIndexError(f"Invalid session id in has_id: {e}") from e
            if not ids:
                # Matches nothing
                return "false"
            return f"({' or '.join(f'{self.ID_FIELD} = {i}' for i in ids)})"

        raise SearchIndexError(f"Unsupported filter condition: {condition}")

    def _hit_session_id(self, value: Any) -> int:
        # Every hit must map to a session id, or the page would be short
        if value is None:
            raise SearchIndexError(f"Vespa hit without a {self.ID_FIELD}")
        if isinstance(value, bool):
            raise SearchIndexError(f"Vespa hit with invalid {self.ID_FIELD}: {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise SearchIndexError(f"Vespa hit with invalid {self.ID_FIELD}: {value!r}") from e

    @staticmethod
    def _safe_key(key: Any) -> str:
        key = str(key)
        if not key.replace("_", "").replace(".", "").isalnum():
            raise SearchIndexError(f"Invalid field name: {key!r}")
        return key

    @staticmethod
    def _escape(value: str) -> str:
        # Escape backslashes first, then quotes
        return value.replace("\\", "\\\\").replace('"', '\\"')
