"""nostrinbox exception hierarchy.

Exception hierarchy:

```text
NostrInboxError (base -- never raised directly)
├── ConfigurationError      -- invalid config values, missing or bad YAML
├── ProtocolError           -- malformed protocol payloads
│   └── MetadataParseError  -- kind-0 content that is not a JSON object
├── KeyResolutionError      -- unresolvable key encoding or credential store failure
└── DirectoryError          -- NIP-05 well-known directory fetch failure
```

Most of these never reach a caller. Ingestion contains
[MetadataParseError][nostrinbox.core.exceptions.MetadataParseError],
key resolution degrades to an empty string, and directory fetches degrade
to ``None``. They exist so each failure is typed at the point it happens
and can be logged under a distinct name.
"""

from __future__ import annotations


class NostrInboxError(Exception):
    """Base exception for all nostrinbox errors."""


class ConfigurationError(NostrInboxError):
    """Invalid or missing configuration (YAML file, config values)."""


class ProtocolError(NostrInboxError):
    """A protocol payload could not be interpreted."""


class MetadataParseError(ProtocolError):
    """Kind-0 metadata content is not valid JSON or not a JSON object.

    Raised by the parse step of
    [ProfileCache.ingest()][nostrinbox.inbox.profile_cache.ProfileCache.ingest]
    and discarded there.
    """


class KeyResolutionError(NostrInboxError):
    """A public key could not be decoded or loaded from the credential store."""


class DirectoryError(NostrInboxError):
    """A NIP-05 well-known document could not be fetched or decoded."""
