"""Pure frozen dataclasses with zero I/O.

The models layer is the bottom of the import graph: it depends on no other
nostrinbox package. Validation happens in ``__post_init__`` so invalid
instances never escape the constructor.

Attributes:
    Event: Immutable Nostr event record with conversion from
        ``nostr_sdk.Event`` and NIP-01 dictionaries.
    EventKind: Event kinds the inbox subscribes to.
    SubscriptionChannel: The received / sent / metadata subscriptions.
"""

from .constants import (
    EVENT_KIND_MAX,
    PROFILE_CACHE_TTL_SECONDS,
    RECIPIENT_TAG,
    EventKind,
    SubscriptionChannel,
)
from .event import Event


__all__ = [
    "EVENT_KIND_MAX",
    "PROFILE_CACHE_TTL_SECONDS",
    "RECIPIENT_TAG",
    "Event",
    "EventKind",
    "SubscriptionChannel",
]
