"""Utility layer: key conversion, subscription filters, bounded HTTP reads.

Attributes:
    to_hex_key: Hex / bech32 public key to hex, ``""`` on failure.
    key_from_tags: Recipient (``p`` tag) lookup.
    received_messages_filter, sent_messages_filter, metadata_filter:
        nostr-sdk filters for the inbox subscriptions.
    read_bounded_json: Size-limited JSON body reader for aiohttp responses.
"""

from .filters import metadata_filter, received_messages_filter, sent_messages_filter
from .http import read_bounded_json
from .keys import (
    ENV_PRIVATE_KEY,
    is_hex_key,
    key_from_tags,
    load_keys_from_env,
    to_hex_key,
    to_npub,
)


__all__ = [
    "ENV_PRIVATE_KEY",
    "is_hex_key",
    "key_from_tags",
    "load_keys_from_env",
    "metadata_filter",
    "read_bounded_json",
    "received_messages_filter",
    "sent_messages_filter",
    "to_hex_key",
    "to_npub",
]
