"""Channel adapter registry — pluggable notification dispatch channels.

Provides singleton access to channel adapters. The in-memory fake push
adapter is used until a real web push adapter is wired in.
"""

PUSH = "Push"

_channel_instances: dict[str, object] = {}


def get_channel(channel_type: str):
    """Return the configured channel adapter (singleton per channel type).

    Args:
        channel_type: Channel name; only ``"Push"`` is available.
    """
    if channel_type not in _channel_instances:
        if channel_type == PUSH:
            from notifications.channel.fake_push import FakePushAdapter

            _channel_instances[channel_type] = FakePushAdapter()
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def get_push_channel():
    return get_channel(PUSH)


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
