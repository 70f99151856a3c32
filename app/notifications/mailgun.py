"""
app/notifications/mailgun.py

End-of-run notification channels.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import requests

from app.config import ExternalHTTPSettings, MailgunSettings
from app.connectors.base import BaseConnector, ConnectorRequestError

logger = logging.getLogger(__name__)


class BaseNotifier(ABC):
    """
    Fire-and-forget notification channel. ``notify`` reports delivery as a
    boolean and never raises.
    """

    @abstractmethod
    def notify(self, subject: str, body: str) -> bool:
        """Send one message; return whether it was accepted."""


class LogNotifier(BaseNotifier):
    """Writes the notification to the log instead of sending it."""

    def notify(self, subject: str, body: str) -> bool:
        logger.info("Notification subject=%r body=%r", subject, body)
        return True


class MailgunNotifier(BaseConnector, BaseNotifier):
    """
    Sends plain-text email through the Mailgun messages API.
    """

    def __init__(
        self,
        *,
        settings: MailgunSettings,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(source="mailgun", http_settings=http_settings, session=session)
        self._settings = settings

    def notify(self, subject: str, body: str) -> bool:
        settings = self._settings
        try:
            self._request(
                method="POST",
                url=f"{settings.base_url}/{settings.domain}/messages",
                auth=("api", settings.api_key or ""),
                data={
                    "from": f"{settings.from_name} <{settings.from_email}>",
                    "to": list(settings.recipients),
                    "subject": subject,
                    "text": body,
                },
            )
        except ConnectorRequestError as exc:
            logger.error("Failed to send notification email subject=%r error=%s", subject, exc)
            return False
        logger.info("Notification email sent recipients=%s", len(settings.recipients))
        return True


def build_notifier(
    settings: MailgunSettings,
    http_settings: ExternalHTTPSettings,
) -> BaseNotifier:
    """
    Return a Mailgun notifier when enabled and fully configured, otherwise
    a log-only notifier.
    """

    if not settings.enabled:
        return LogNotifier()
    if not settings.is_configured:
        logger.warning(
            "Mailgun is enabled but MAILGUN_API_KEY, MAILGUN_DOMAIN, MAILGUN_FROM_EMAIL "
            "or MAILGUN_RECIPIENTS is missing; notifications will only be logged."
        )
        return LogNotifier()
    return MailgunNotifier(settings=settings, http_settings=http_settings)
