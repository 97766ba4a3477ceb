"""
Immutable Nostr event record.

The inbox works on plain values rather than on ``nostr_sdk.Event`` handles:
aggregation compares ids, authors and timestamps across thousands of events
and tests need to build events with arbitrary (even non-hex) keys. The
[Event][nostrinbox.models.event.Event] dataclass carries exactly the fields
the aggregation needs and converts from SDK events and raw dicts.

Signatures are not carried: events reaching the inbox are assumed to be
verified by the relay layer.

See Also:
    [nostrinbox.inbox.contacts][]: Merges events from the sent and received
        subscriptions.
    [nostrinbox.inbox.profile_cache][]: Consumes kind-0 events.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ._validation import freeze_tags, validate_int, validate_str_no_null
from .constants import EVENT_KIND_MAX


if TYPE_CHECKING:
    from collections.abc import Mapping

    from nostr_sdk import Event as NostrEvent


@dataclass(frozen=True, slots=True)
class Event:
    """Immutable Nostr event.

    Attributes:
        id: Event id (hex), unique across the observed stream.
        pubkey: Author public key (hex).
        created_at: Unix timestamp in seconds. Monotonic per author only.
        kind: Integer event kind (0 = metadata, 4 = direct message).
        tags: Tag arrays, normalized to a tuple of string tuples.
        content: Raw content string (JSON for metadata events).

    Raises:
        TypeError: If a field has the wrong type.
        ValueError: If ``created_at``/``kind`` is negative, ``kind`` exceeds
            65535, or a string contains null bytes.

    Examples:
        ```python
        event = Event(id="a", pubkey="bob", created_at=100, tags=[["p", "me"]])
        event.tags  # (("p", "me"),)
        ```

    Note:
        Equality and hashing use every field, but two events with the same
        ``id`` are the same logical event; the aggregation layer deduplicates
        by ``id`` explicitly.
    """

    id: str
    pubkey: str
    created_at: int
    kind: int = 4
    tags: tuple[tuple[str, ...], ...] = ()
    content: str = ""

    def __post_init__(self) -> None:
        """Validate field types and freeze the tag list."""
        validate_str_no_null(self.id, "id")
        validate_str_no_null(self.pubkey, "pubkey")
        validate_int(self.created_at, "created_at")
        validate_int(self.kind, "kind")
        if self.kind > EVENT_KIND_MAX:
            raise ValueError(f"kind must be <= {EVENT_KIND_MAX}, got {self.kind}")
        validate_str_no_null(self.content, "content")
        object.__setattr__(self, "tags", freeze_tags(self.tags, "tags"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Event:
        """Build an event from a NIP-01 JSON object (``sig`` is ignored).

        Raises:
            KeyError: If ``id``, ``pubkey`` or ``created_at`` is missing.
        """
        return cls(
            id=data["id"],
            pubkey=data["pubkey"],
            created_at=data["created_at"],
            kind=data.get("kind", 4),
            tags=data.get("tags", ()),
            content=data.get("content", ""),
        )

    @classmethod
    def from_nostr_event(cls, event: NostrEvent) -> Event:
        """Convert a ``nostr_sdk.Event`` received from a relay subscription."""
        return cls(
            id=event.id().to_hex(),
            pubkey=event.author().to_hex(),
            created_at=event.created_at().as_secs(),
            kind=event.kind().as_u16(),
            tags=[list(tag.as_vec()) for tag in event.tags().to_vec()],
            content=event.content(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a NIP-01 style dictionary (without ``sig``)."""
        return {
            "id": self.id,
            "pubkey": self.pubkey,
            "created_at": self.created_at,
            "kind": self.kind,
            "tags": [list(tag) for tag in self.tags],
            "content": self.content,
        }
