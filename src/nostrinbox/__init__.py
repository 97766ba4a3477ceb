r"""nostrinbox -- client-side direct-message aggregation for Nostr.

Turns the raw event streams of a Nostr messenger (messages sent, messages
received, profile metadata) into a contact list, the last message per
contact, the unread set, and TTL-cached profiles.

Imports flow strictly downward:

```text
              inbox            Aggregation, caching, session orchestration
             /  |  \
          core nips utils      Logging/errors/YAML, NIP-01/NIP-05, keys/filters/HTTP
             \  |  /
              models           Frozen dataclasses (zero I/O)
```

Note:
    Top-level imports (``from nostrinbox import Inbox``) use lazy loading
    and resolve on first access.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("nostrinbox")

__all__ = [
    "ContactAggregator",
    "Contacts",
    "Event",
    "EventKind",
    "Inbox",
    "InboxConfig",
    "Logger",
    "Nip05Directory",
    "Profile",
    "ProfileCache",
    "PublicKeyResolver",
    "SubscriptionChannel",
    "UnreadStatus",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "ContactAggregator": ("nostrinbox.inbox", "ContactAggregator"),
    "Contacts": ("nostrinbox.inbox", "Contacts"),
    "Event": ("nostrinbox.models", "Event"),
    "EventKind": ("nostrinbox.models", "EventKind"),
    "Inbox": ("nostrinbox.inbox", "Inbox"),
    "InboxConfig": ("nostrinbox.inbox", "InboxConfig"),
    "Logger": ("nostrinbox.core", "Logger"),
    "Nip05Directory": ("nostrinbox.nips", "Nip05Directory"),
    "Profile": ("nostrinbox.nips", "Profile"),
    "ProfileCache": ("nostrinbox.inbox", "ProfileCache"),
    "PublicKeyResolver": ("nostrinbox.inbox", "PublicKeyResolver"),
    "SubscriptionChannel": ("nostrinbox.models", "SubscriptionChannel"),
    "UnreadStatus": ("nostrinbox.inbox", "UnreadStatus"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value
        return value
    raise AttributeError(f"module 'nostrinbox' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
