"""Exceptions raised by the session deletion pipeline.

Every error carries the stage it was raised in and is propagated to the
caller unchanged; nothing is retried internally. The invoking orchestration
layer decides whether to re-run a stage.
"""

from enum import Enum


class DeletionStage(str, Enum):
    """Pipeline stage an error originated from."""

    ENUMERATE = "enumerate"
    DELETE_INDEX = "delete_index"
    DELETE_POSTGRES = "delete_postgres"
    DELETE_STORAGE = "delete_storage"
    NOTIFY = "notify"


class SessionDeletionError(Exception):
    """Base exception for the session deletion pipeline."""

    def __init__(self, message: str, stage: DeletionStage):
        """Initialize the error.

        Args:
            message: Human-readable description of the failure
            stage: Stage the failure happened in
        """
        self.message = message
        self.stage = stage
        super().__init__(f"{stage.value}: {message}")


class UpstreamReadError(SessionDeletionError):
    """Raised when a search, listing or manifest read fails.

    Aborts the current stage; no partial result is returned.
    """

    pass


class UpstreamWriteError(SessionDeletionError):
    """Raised when a delete or insert fails.

    Aborts the current batch. Earlier batches and earlier ids in the batch
    are not rolled back; every delete is idempotent and safe to re-run.
    """

    pass


class NotificationError(SessionDeletionError):
    """Raised when the completion email could not be sent."""

    def __init__(self, message: str):
        """Initialize the error.

        Args:
            message: Human-readable description of the failure
        """
        super().__init__(message, DeletionStage.NOTIFY)
