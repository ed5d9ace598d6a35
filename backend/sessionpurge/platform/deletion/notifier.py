"""Completion notification for session deletion requests."""

from typing import Optional

from sessionpurge.core.exceptions import DeletionStage, NotificationError
from sessionpurge.core.logging import ContextualLogger
from sessionpurge.core.logging import logger as default_logger
from sessionpurge.email import EmailClient, get_sessions_deleted_email
from sessionpurge.schemas import QuerySessionsInput


class DeletionNotifier:
    """Tells the requester their sessions were deleted. Never retries."""

    def __init__(self, email_client: EmailClient, logger: Optional[ContextualLogger] = None):
        """Initialize the notifier.

        Args:
            email_client: Transactional email sender
            logger: Base logger
        """
        self.email_client = email_client
        self._logger = logger or default_logger

    async def notify(self, request: QuerySessionsInput) -> None:
        """Send the completion email.

        Raises:
            NotificationError: If there is no recipient, the send fails, or the
                provider answers with a status code >= 300
        """
        log = self._logger.with_context(stage=DeletionStage.NOTIFY.value, project_id=request.project_id)
        if not request.email:
            raise NotificationError("no recipient email address on the request")

        subject, html_body = get_sessions_deleted_email(
            first_name=request.first_name,
            session_count=request.session_count,
        )
        status_code = await self.email_client.send(to=request.email, subject=subject, html=html_body)

        if status_code >= 300:
            raise NotificationError(f"error sending email -> resp-code: {status_code}")

        log.info(f"Sent deletion email for {request.session_count} sessions")
