"""Push notification channel port — abstract interface for browser push."""

from abc import ABC, abstractmethod


class PushPort(ABC):
    """Abstract interface for push notification adapters."""

    @abstractmethod
    def request_token(self) -> str | None:
        """Ask the user agent for permission and return a device token.

        Returns None when permission is denied or push is unsupported.
        """
        ...

    @abstractmethod
    def send(
        self,
        device_token: str,
        title: str,
        body: str,
        data: dict | None = None,
    ) -> dict:
        """Send a push notification.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
