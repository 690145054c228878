"""New order template — pushed to staff when an order arrives on the board."""

from notifications.channel import PUSH


class NewOrderTemplate:
    notification_type = "NewOrder"
    default_channels = [PUSH]
    tag = "new-order"
    link = "/admin"

    @staticmethod
    def render(context: dict) -> dict:
        count = context.get("count", 1)
        return {
            "title": "New order!",
            "body": "A new order needs attention" if count == 1 else f"{count} new orders need attention",
            "data": {
                "tag": NewOrderTemplate.tag,
                "link": NewOrderTemplate.link,
            },
        }
