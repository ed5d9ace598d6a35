# noqa: E501

"""Email templates for session deletion notifications."""

from html import escape
from typing import Optional


def get_sessions_deleted_email(
    first_name: Optional[str],
    session_count: int,
) -> tuple[str, str]:
    """Generate email subject and HTML body for a completed session deletion.

    Args:
    ----
        first_name (Optional[str]): Requester first name (generic greeting if empty)
        session_count (int): Number of sessions deleted

    Returns:
    -------
        tuple[str, str]: (subject, html_body)

    """
    greeting = f"Hi {escape(first_name)}," if first_name else "Hi,"
    plural = "" if session_count == 1 else "s"

    subject = f"{session_count:,} session{plural} deleted"
    html_body = f"""
<div style="font-family: Arial, sans-serif; font-size: 10pt;">
    <p style="margin: 0 0 15px 0;">
        {greeting}
    </p>

    <p style="margin: 0 0 15px 0;">
        Your session deletion request has completed. <strong>{session_count:,}
        session{plural}</strong> and their recorded data have been permanently removed.
    </p>

    <p style="margin: 0 0 15px 0;">
        Deleted sessions no longer appear in search results and their recordings
        can no longer be replayed.
    </p>

    <p style="margin: 15px 0 0 0;">
        If you have any questions, feel free to reach out.<br>
        <br>
        The Highlight Team
    </p>
</div>
    """

    return subject, html_body
