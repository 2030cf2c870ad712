"""Customer notification infrastructure."""

from shopdesk.infrastructure.notifications.whatsapp import WhatsAppNotifier, get_notifier

__all__ = ["WhatsAppNotifier", "get_notifier"]
