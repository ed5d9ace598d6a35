"""Schemas passed between the session deletion stages.

The wire form uses camelCase keys; Python code uses snake_case attributes.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _StageModel(BaseModel):
    """Base for stage payloads."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the camelCase dict exchanged between stages."""
        return self.model_dump(mode="json", by_alias=True)


class QuerySessionsInput(_StageModel):
    """A deletion request: which sessions to purge and who to tell afterwards.

    Ephemeral. Only lives for the duration of enumeration (and notification).
    """

    project_id: int = Field(..., description="Project the sessions belong to")
    query: Dict[str, Any] = Field(
        default_factory=dict,
        description="Canonical filter (must / should / must_not conditions) selecting sessions",
    )
    dry_run: bool = Field(default=True, description="Exercise read paths without deleting")
    email: Optional[str] = Field(default=None, description="Requester email address")
    first_name: Optional[str] = Field(default=None, description="Requester first name")
    session_count: int = Field(default=0, ge=0, description="Sessions deleted for the request")


class BatchIdResponse(_StageModel):
    """Handle to a persisted batch manifest.

    Workers receive this instead of the session ids and re-resolve the ids from
    the manifest store, which stays the single source of truth.
    """

    project_id: int
    task_id: str
    batch_id: str
    dry_run: bool
