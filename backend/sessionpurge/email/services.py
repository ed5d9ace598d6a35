"""Email delivery through the Resend HTTP API."""

from typing import Optional

import httpx

from sessionpurge.core.config import settings
from sessionpurge.core.exceptions import NotificationError
from sessionpurge.core.logging import logger


class EmailClient:
    """Sends transactional email.

    Returns the provider's HTTP status code; interpreting it is up to the caller.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        from_name: Optional[str] = None,
        from_address: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        """Initialize the email client.

        Args:
            api_key: Resend API key (defaults to settings)
            api_url: Send endpoint (defaults to settings)
            from_name: Sender display name (defaults to settings)
            from_address: Sender address (defaults to settings)
            http_client: Shared httpx client (a short-lived one is used if None)
            timeout: Request timeout in seconds
        """
        self.api_key = api_key or settings.RESEND_API_KEY
        self.api_url = api_url or settings.RESEND_API_URL
        self.from_name = from_name or settings.EMAIL_FROM_NAME
        self.from_address = from_address or settings.EMAIL_FROM_ADDRESS
        self._http_client = http_client
        self._timeout = timeout

    @property
    def sender(self) -> str:
        """Formatted From header."""
        return f"{self.from_name} <{self.from_address}>"

    async def send(self, to: str, subject: str, html: str) -> int:
        """Send a single email.

        Args:
            to: Recipient address
            subject: Subject line
            html: HTML body

        Returns:
            HTTP status code returned by the provider

        Raises:
            NotificationError: If no API key is configured or the request fails in transit
        """
        if not self.api_key:
            raise NotificationError("RESEND_API_KEY is not configured")

        payload = {
            "from": self.sender,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    self.api_url, json=payload, headers=headers, timeout=self._timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise NotificationError(f"error sending email -> err: {e}") from e

        logger.debug(f"Email provider answered {response.status_code} for {to}")
        return response.status_code
