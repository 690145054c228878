"""Admin alerts — toast messages and optional push for new orders.

Staff opt in to push notifications from the admin board. Without a device
token (permission denied, or push unsupported) the board still gets an
in-page toast for every new order, and a failed push degrades to the toast.
"""

import threading
from dataclasses import dataclass

import structlog

from notifications.channel import get_push_channel
from notifications.templates import get_template

logger = structlog.get_logger(__name__)

DEFAULT_TITLE = "New order"
DEFAULT_BODY = "A new order needs attention"
NOTIFICATION_TAG = "order-notification"
CLICK_TARGET = "/admin"


@dataclass(frozen=True)
class Toast:
    level: str  # "success", "warning" or "error"
    text: str


class AdminAlerts:
    def __init__(self, channel=None):
        self._channel = channel
        self._lock = threading.Lock()
        self.enabled = False
        self.device_token: str | None = None
        self.toasts: list[Toast] = []

    @property
    def channel(self):
        return self._channel or get_push_channel()

    def _toast(self, level, text):
        with self._lock:
            self.toasts.append(Toast(level, text))

    def drain_toasts(self) -> list[Toast]:
        with self._lock:
            toasts, self.toasts = self.toasts, []
        return toasts

    def enable(self) -> bool:
        """Request push permission. Returns False if no token could be obtained."""
        try:
            token = self.channel.request_token()
        except Exception as exc:
            logger.warning("Push permission request failed", error=str(exc))
            self._toast("error", "Could not enable push notifications")
            return False

        if not token:
            logger.info("Push permission not granted")
            self._toast("error", "Push notifications are not available")
            return False

        with self._lock:
            self.enabled = True
            self.device_token = token
        self._toast("success", "Push notifications enabled")
        return True

    def disable(self) -> None:
        with self._lock:
            self.enabled = False
            self.device_token = None
        self._toast("warning", "Push notifications disabled")

    def notify_new_order(self, count=1) -> bool:
        """Alert staff about `count` new orders with one toast and at most one push.

        Returns True if a push was delivered.
        """
        self._toast("warning", "New order!")

        with self._lock:
            enabled, token = self.enabled, self.device_token
        if not enabled:
            return False

        content = get_template("NewOrder").render({"count": count})
        try:
            result = self.channel.send(
                device_token=token,
                title=content["title"],
                body=content["body"],
                data=content["data"],
            )
        except Exception as exc:
            logger.warning("New order push failed", error=str(exc))
            return False

        if result.get("status") != "sent":
            logger.warning("New order push failed", error=result.get("error"))
            return False
        return True


def render_push_notification(payload: dict | None, foreground: bool) -> dict | None:
    """Build the notification to display for an incoming push message.

    Foreground messages are only shown when they carry a notification block;
    background messages are always shown, falling back to default texts.
    """
    payload = payload or {}
    notification = payload.get("notification")
    if foreground and not notification:
        return None

    notification = notification or {}
    rendered = {
        "title": notification.get("title") or DEFAULT_TITLE,
        "body": notification.get("body") or DEFAULT_BODY,
        "tag": NOTIFICATION_TAG,
        "require_interaction": True,
        "click_target": CLICK_TARGET,
    }
    if not foreground:
        rendered["icon"] = "/favicon.ico"
        rendered["data"] = payload.get("data")
    return rendered


_alerts: AdminAlerts | None = None


def get_admin_alerts() -> AdminAlerts:
    global _alerts
    if _alerts is None:
        _alerts = AdminAlerts()
    return _alerts


def reset_admin_alerts() -> None:
    global _alerts
    _alerts = None
