"""Inbox layer: aggregation, caching and session orchestration.

Attributes:
    ProfileCache, get_profile_cache: TTL profile cache and its process-wide
        instance.
    ContactAggregator, aggregate_contacts, Contacts: Contact list, last
        event per contact and unread events from the sent/received
        subscriptions.
    classify_unread, is_unread: Unread classification.
    PublicKeyResolver, CredentialStore, EnvCredentialStore: One-shot session
        key resolution.
    UnreadStatus, format_title: Unread-count title and sound notifications.
    Inbox, InboxConfig: Facade combining the above for one session.
"""

from .configs import InboxConfig, Nip05Config
from .contacts import (
    ContactAggregator,
    Contacts,
    aggregate_contacts,
    contact_key_for,
    global_contacts,
    merge_events,
)
from .inbox import Inbox, make_unread_status
from .notifications import UnreadStatus, format_title
from .profile_cache import ProfileCache, get_profile_cache, parse_metadata
from .session import CredentialStore, EnvCredentialStore, PublicKeyResolver
from .unread import classify_unread, is_unread


__all__ = [
    "ContactAggregator",
    "Contacts",
    "CredentialStore",
    "EnvCredentialStore",
    "Inbox",
    "InboxConfig",
    "Nip05Config",
    "ProfileCache",
    "PublicKeyResolver",
    "UnreadStatus",
    "aggregate_contacts",
    "classify_unread",
    "contact_key_for",
    "format_title",
    "get_profile_cache",
    "global_contacts",
    "is_unread",
    "make_unread_status",
    "merge_events",
    "parse_metadata",
]
