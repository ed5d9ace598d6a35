"""Email module for session deletion notifications."""

from sessionpurge.email.services import EmailClient
from sessionpurge.email.templates import get_sessions_deleted_email

__all__ = [
    "EmailClient",
    "get_sessions_deleted_email",
]
