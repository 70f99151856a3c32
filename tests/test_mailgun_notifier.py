"""
tests/test_mailgun_notifier.py

Pytest unit tests for the end-of-run notifiers.
"""

from __future__ import annotations

import logging

import pytest

from app.config import MailgunSettings
from app.notifications.mailgun import LogNotifier, MailgunNotifier, build_notifier

CONFIGURED = MailgunSettings(
    api_key="key-123",
    domain="mg.example.org",
    from_email="bot@example.org",
    recipients=("ops@example.org", "lead@example.org"),
    base_url="https://mailgun.example/v3",
)


@pytest.fixture()
def notifier(fake_session, http_settings) -> MailgunNotifier:
    return MailgunNotifier(settings=CONFIGURED, http_settings=http_settings, session=fake_session)


class TestMailgunNotifier:
    def test_posts_message_with_basic_auth(self, notifier, fake_session) -> None:
        fake_session.add("POST", "/messages", {"id": "<1@mg>", "message": "Queued."})

        assert notifier.notify("Report", "body text") is True

        call = fake_session.calls[0]
        assert call.url == "https://mailgun.example/v3/mg.example.org/messages"
        assert call.auth == ("api", "key-123")
        assert call.data == {
            "from": "Pump House Bot <bot@example.org>",
            "to": ["ops@example.org", "lead@example.org"],
            "subject": "Report",
            "text": "body text",
        }

    def test_failure_returns_false(self, notifier, fake_session) -> None:
        fake_session.add("POST", "/messages", {"message": "Forbidden"}, status_code=401)
        assert notifier.notify("Report", "body") is False


class TestBuildNotifier:
    def test_configured_settings_build_mailgun(self, http_settings) -> None:
        assert isinstance(build_notifier(CONFIGURED, http_settings), MailgunNotifier)

    def test_disabled_settings_build_log_notifier(self, http_settings) -> None:
        settings = MailgunSettings(enabled=False, api_key="k", domain="d", from_email="f", recipients=("r",))
        assert isinstance(build_notifier(settings, http_settings), LogNotifier)

    def test_incomplete_settings_build_log_notifier(self, http_settings) -> None:
        assert isinstance(build_notifier(MailgunSettings(api_key="k"), http_settings), LogNotifier)

    def test_log_notifier_logs_subject(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="app.notifications.mailgun"):
            assert LogNotifier().notify("Pump House Automation", "body") is True
        assert "Pump House Automation" in caplog.text
