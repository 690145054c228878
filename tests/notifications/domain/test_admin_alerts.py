"""Tests for admin alerts — toasts always, push when enabled."""

from notifications.alerts import AdminAlerts, get_admin_alerts, render_push_notification, reset_admin_alerts
from notifications.channel.fake_push import FakePushAdapter
from notifications.channel.push_port import PushPort


class _BrokenPush(PushPort):
    def request_token(self):
        raise RuntimeError("push unsupported")

    def send(self, device_token, title, body, data=None):
        raise RuntimeError("push unsupported")


class TestEnable:
    def test_enable_stores_token(self):
        push = FakePushAdapter()
        alerts = AdminAlerts(channel=push)

        assert alerts.enable() is True
        assert alerts.enabled is True
        assert alerts.device_token == push.issued_tokens[0]
        assert alerts.drain_toasts()[0].level == "success"

    def test_permission_denied_stays_disabled(self):
        push = FakePushAdapter()
        push.configure(permission_granted=False)
        alerts = AdminAlerts(channel=push)

        assert alerts.enable() is False
        assert alerts.enabled is False
        assert alerts.drain_toasts()[0].level == "error"

    def test_unsupported_channel_never_raises(self):
        alerts = AdminAlerts(channel=_BrokenPush())
        assert alerts.enable() is False
        assert alerts.enabled is False

    def test_disable(self):
        alerts = AdminAlerts(channel=FakePushAdapter())
        alerts.enable()
        alerts.disable()
        assert alerts.enabled is False
        assert alerts.device_token is None


class TestNotifyNewOrder:
    def test_toast_only_when_disabled(self):
        push = FakePushAdapter()
        alerts = AdminAlerts(channel=push)

        assert alerts.notify_new_order() is False
        assert [t.text for t in alerts.toasts] == ["New order!"]
        assert push.sent_pushes == []

    def test_push_when_enabled(self):
        push = FakePushAdapter()
        alerts = AdminAlerts(channel=push)
        alerts.enable()

        assert alerts.notify_new_order() is True

        sent = push.sent_pushes[0]
        assert sent["device_token"] == alerts.device_token
        assert sent["title"] == "New order!"
        assert sent["body"] == "A new order needs attention"
        assert sent["data"] == {"tag": "new-order", "link": "/admin"}

    def test_batch_push_counts_new_orders(self):
        push = FakePushAdapter()
        alerts = AdminAlerts(channel=push)
        alerts.enable()

        assert alerts.notify_new_order(count=3) is True
        assert push.sent_pushes[0]["body"] == "3 new orders need attention"

    def test_failed_push_degrades_to_toast(self):
        push = FakePushAdapter()
        alerts = AdminAlerts(channel=push)
        alerts.enable()
        alerts.drain_toasts()
        push.configure(should_succeed=False)

        assert alerts.notify_new_order() is False
        assert [t.text for t in alerts.toasts] == ["New order!"]

    def test_channel_exception_degrades_to_toast(self):
        alerts = AdminAlerts(channel=_BrokenPush())
        alerts.enabled = True
        alerts.device_token = "device-1"

        assert alerts.notify_new_order() is False
        assert [t.text for t in alerts.toasts] == ["New order!"]


class TestRegistry:
    def test_singleton_and_reset(self):
        first = get_admin_alerts()
        assert get_admin_alerts() is first
        reset_admin_alerts()
        assert get_admin_alerts() is not first


class TestRenderPushNotification:
    def test_background_message_with_defaults(self):
        rendered = render_push_notification({"data": {"order_id": "abc"}}, foreground=False)
        assert rendered == {
            "title": "New order",
            "body": "A new order needs attention",
            "tag": "order-notification",
            "require_interaction": True,
            "click_target": "/admin",
            "icon": "/favicon.ico",
            "data": {"order_id": "abc"},
        }

    def test_background_message_keeps_payload_texts(self):
        rendered = render_push_notification(
            {"notification": {"title": "New order!", "body": "Table 4"}},
            foreground=False,
        )
        assert rendered["title"] == "New order!"
        assert rendered["body"] == "Table 4"

    def test_foreground_message_with_notification(self):
        rendered = render_push_notification({"notification": {"title": "New order!"}}, foreground=True)
        assert rendered["title"] == "New order!"
        assert rendered["body"] == "A new order needs attention"
        assert rendered["tag"] == "order-notification"
        assert rendered["click_target"] == "/admin"

    def test_foreground_data_only_message_is_not_shown(self):
        assert render_push_notification({"data": {"x": 1}}, foreground=True) is None

    def test_missing_payload(self):
        assert render_push_notification(None, foreground=False)["title"] == "New order"
