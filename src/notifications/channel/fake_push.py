"""Fake push adapter — records pushes in memory and simulates permission prompts."""

from uuid import uuid4

from notifications.channel.push_port import PushPort


class FakePushAdapter(PushPort):
    def __init__(self):
        self.sent_pushes: list[dict] = []
        self.issued_tokens: list[str] = []
        self.permission_granted = True
        self.should_succeed = True
        self.failure_reason = "Push delivery failed"

    def configure(
        self,
        permission_granted: bool = True,
        should_succeed: bool = True,
        failure_reason: str = "Push delivery failed",
    ):
        """Configure the fake adapter behavior for testing."""
        self.permission_granted = permission_granted
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def request_token(self) -> str | None:
        if not self.permission_granted:
            return None

        token = f"device-{uuid4().hex[:16]}"
        self.issued_tokens.append(token)
        return token

    def send(
        self,
        device_token: str,
        title: str,
        body: str,
        data: dict | None = None,
    ) -> dict:
        if not self.should_succeed:
            return {
                "message_id": None,
                "status": "failed",
                "error": self.failure_reason,
            }

        message_id = f"push-{uuid4().hex[:12]}"
        self.sent_pushes.append(
            {
                "message_id": message_id,
                "device_token": device_token,
                "title": title,
                "body": body,
                "data": data,
            }
        )
        return {"message_id": message_id, "status": "sent"}

    def reset(self):
        self.sent_pushes.clear()
        self.issued_tokens.clear()
        self.permission_granted = True
        self.should_succeed = True
        self.failure_reason = "Push delivery failed"
