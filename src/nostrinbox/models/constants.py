"""Shared constants for the models layer.

See Also:
    [nostrinbox.utils.filters][]: Builds subscription filters from
        [EventKind][nostrinbox.models.constants.EventKind].
    [nostrinbox.inbox.inbox][]: Routes events by
        [SubscriptionChannel][nostrinbox.models.constants.SubscriptionChannel].
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class EventKind(IntEnum):
    """Nostr event kinds the inbox subscribes to.

    Attributes:
        SET_METADATA: Kind 0 -- user profile metadata (NIP-01).
        ENCRYPTED_DIRECT_MESSAGE: Kind 4 -- encrypted direct message (NIP-04).
    """

    SET_METADATA = 0
    ENCRYPTED_DIRECT_MESSAGE = 4


class SubscriptionChannel(StrEnum):
    """The three long-lived subscriptions that feed the inbox.

    Attributes:
        RECEIVED: Direct messages addressed to the active key (``#p`` filter).
        SENT: Direct messages authored by the active key (``authors`` filter).
        METADATA: Kind-0 profile metadata for contacts.
    """

    RECEIVED = "received"
    SENT = "sent"
    METADATA = "metadata"


RECIPIENT_TAG = "p"

PROFILE_CACHE_TTL_SECONDS = 60 * 60

EVENT_KIND_MAX = 65_535
