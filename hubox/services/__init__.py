"""Services that orchestrate the notification inbox."""

from hubox.services.notification_manager import NotificationManager, parse_subject_url

__all__ = ["NotificationManager", "parse_subject_url"]
