"""Template registry — maps notification types to template classes.

Each template knows its default channels and how to render content
from context data.
"""

from notifications.templates.new_order import NewOrderTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NewOrderTemplate.notification_type: NewOrderTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
