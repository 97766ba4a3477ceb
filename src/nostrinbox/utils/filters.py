"""Subscription filter builders for the inbox's relay subscriptions.

The relay transport itself lives outside nostrinbox; these helpers only
describe *what* to subscribe to, as ``nostr_sdk.Filter`` objects the
caller hands to its client:

* received -- ``{"kinds": [4], "#p": [me]}``
* sent -- ``{"kinds": [4], "authors": [me]}``
* metadata -- ``{"kinds": [0], "authors": [key]}``

Raises:
    nostr_sdk.NostrSdkError: From every builder when the key is not a
        valid public key.
"""

from __future__ import annotations

from nostr_sdk import Alphabet, Filter, Kind, PublicKey, SingleLetterTag

from nostrinbox.models.constants import EventKind


def received_messages_filter(public_key: str) -> Filter:
    """Direct messages addressed to *public_key*."""
    recipient = PublicKey.parse(public_key).to_hex()
    return (
        Filter()
        .kinds([Kind(EventKind.ENCRYPTED_DIRECT_MESSAGE)])
        .custom_tag(SingleLetterTag.lowercase(Alphabet.P), recipient)
    )


def sent_messages_filter(public_key: str) -> Filter:
    """Direct messages authored by *public_key*."""
    return (
        Filter()
        .kinds([Kind(EventKind.ENCRYPTED_DIRECT_MESSAGE)])
        .authors([PublicKey.parse(public_key)])
    )


def metadata_filter(public_key: str) -> Filter:
    """Kind-0 profile metadata published by *public_key*."""
    return Filter().kinds([Kind(EventKind.SET_METADATA)]).authors([PublicKey.parse(public_key)])
