"""Abstract push notifier interface."""

from abc import ABC, abstractmethod
from typing import Mapping, Optional


class Notifier(ABC):
    """Abstract base class for push notification relays."""

    @abstractmethod
    def send(self, title: str, body: str, options: Optional[Mapping[str, str]] = None) -> None:
        """
        Deliver one notification to every configured recipient.

        Args:
            title: Notification title.
            body: Notification text.
            options: Relay-specific extras (sound name, group, ...).

        Raises:
            NotificationError: If delivery failed for any recipient.
        """
        pass
