"""Tests for the deletion email template."""

from sessionpurge.email import get_sessions_deleted_email


def test_subject_pluralizes_and_groups_thousands():
    subject, _ = get_sessions_deleted_email(first_name="Ada", session_count=25000)
    assert subject == "25,000 sessions deleted"


def test_subject_singular():
    subject, _ = get_sessions_deleted_email(first_name="Ada", session_count=1)
    assert subject == "1 session deleted"


def test_greets_by_first_name():
    _, html_body = get_sessions_deleted_email(first_name="Ada", session_count=3)
    assert "Hi Ada," in html_body
    assert "<strong>3" in html_body


def test_generic_greeting_without_first_name():
    _, html_body = get_sessions_deleted_email(first_name=None, session_count=3)
    assert "Hi," in html_body


def test_first_name_is_html_escaped():
    _, html_body = get_sessions_deleted_email(first_name="<b>Eve</b>", session_count=2)
    assert "<b>Eve</b>" not in html_body
    assert "&lt;b&gt;Eve&lt;/b&gt;" in html_body
