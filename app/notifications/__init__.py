"""
app/notifications package marker.
"""

from app.notifications.mailgun import BaseNotifier, LogNotifier, MailgunNotifier, build_notifier

__all__ = [
    "BaseNotifier",
    "LogNotifier",
    "MailgunNotifier",
    "build_notifier",
]
