"""
Contact aggregation over the sent and received direct-message subscriptions.

Two independent subscriptions feed the inbox: messages addressed to the
active key (``received``) and messages authored by it (``sent``). From their
union this module derives:

* ``contact_keys`` -- NIP-05 well-known contacts first (directory order),
  then contacts discovered in traffic (first-seen order), never the active
  key itself and never an empty key;
* ``last_events`` -- the latest event exchanged with each contact, or
  ``None`` for contacts known only from the directory;
* ``unread_events`` -- see [nostrinbox.inbox.unread][].

The contact of a self-authored event is its recipient (first ``p`` tag);
for every other event it is the author.

Merge order is received events followed by sent events. An event id seen in
both subscriptions is kept once, at its first position. Among events with
equal ``created_at`` for the same contact, the one later in merge order is
the last event.

Nothing here assumes that relays deliver events in ``created_at`` order:
every result is recomputed from the full buffers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from nostrinbox.core.logger import Logger
from nostrinbox.utils.keys import key_from_tags, to_hex_key

from .unread import classify_unread


if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping

    from nostrinbox.models.event import Event


_logger = Logger("nostrinbox.contacts")


@dataclass(frozen=True, slots=True)
class Contacts:
    """Derived contact state for one recomputation.

    Attributes:
        contact_keys: Ordered hex keys of conversation partners.
        events: Merged, id-deduplicated events (received then sent).
        last_events: Contact key to its latest event, ``None`` when there
            has been no traffic with that contact.
        unread_events: Unread subsequence of ``events``.
    """

    contact_keys: tuple[str, ...] = ()
    events: tuple[Event, ...] = ()
    last_events: Mapping[str, Event | None] = field(
        default_factory=lambda: MappingProxyType({})
    )
    unread_events: tuple[Event, ...] = ()

    def last_event(self, contact_key: str) -> Event | None:
        """Latest event with *contact_key*; ``None`` if none or unknown."""
        return self.last_events.get(contact_key)

    @property
    def unread_count(self) -> int:
        return len(self.unread_events)


def merge_events(received: Iterable[Event], sent: Iterable[Event]) -> tuple[Event, ...]:
    """Concatenate received then sent events, keeping the first copy of each id."""
    merged: dict[str, Event] = {}
    for source in (received, sent):
        for event in source:
            merged.setdefault(event.id, event)
    return tuple(merged.values())


def global_contacts(well_known_names: Mapping[str, str]) -> tuple[str, ...]:
    """Hex keys of the directory entries, in directory order.

    Entries that cannot be decoded are dropped; duplicates collapse.
    """
    keys: dict[str, None] = {}
    for name, encoded in well_known_names.items():
        key = to_hex_key(encoded)
        if not key:
            _logger.debug("well_known_name_unresolved", name=name)
            continue
        keys.setdefault(key)
    return tuple(keys)


def contact_key_for(event: Event, public_key: str) -> str:
    """The other party of *event*: its recipient if self-authored, else its author.

    Returns ``""`` for a self-authored event without a ``p`` tag.
    """
    if event.pubkey == public_key:
        return key_from_tags(event.tags) or ""
    return event.pubkey


def aggregate_contacts(  # noqa: PLR0913
    public_key: str,
    well_known_names: Mapping[str, str],
    login_time: int,
    seen_event_ids: Collection[str],
    received: Iterable[Event],
    sent: Iterable[Event],
) -> Contacts:
    """Compute contacts, last events and unread events from scratch.

    Args:
        public_key: Active user's hex key. Empty yields empty
            [Contacts][nostrinbox.inbox.contacts.Contacts].
        well_known_names: NIP-05 name to encoded key mapping.
        login_time: Session start, Unix seconds.
        seen_event_ids: Ids the caller has already marked read.
        received: Events from the received subscription.
        sent: Events from the sent subscription.
    """
    if not public_key:
        return Contacts()

    events = merge_events(received, sent)

    keys: dict[str, None] = dict.fromkeys(global_contacts(well_known_names))
    for event in events:
        key = contact_key_for(event, public_key)
        if key:
            keys.setdefault(key)
    keys.pop(public_key, None)
    contact_keys = tuple(keys)

    last_events: dict[str, Event | None] = dict.fromkeys(contact_keys)
    for event in events:
        for candidate in {event.pubkey, key_from_tags(event.tags)}:
            if candidate not in last_events:
                continue
            current = last_events[candidate]
            if current is None or event.created_at >= current.created_at:
                last_events[candidate] = event

    unread_events = classify_unread(events, public_key, login_time, seen_event_ids)

    return Contacts(
        contact_keys=contact_keys,
        events=events,
        last_events=MappingProxyType(last_events),
        unread_events=unread_events,
    )


class ContactAggregator:
    """Buffers the sent and received subscriptions for one active key.

    Each buffer keeps one event per id in arrival order. Derived state is
    produced by [contacts()][nostrinbox.inbox.contacts.ContactAggregator.contacts],
    which recomputes from the buffers on every call.
    """

    def __init__(self, public_key: str) -> None:
        self._public_key = public_key
        self._received: dict[str, Event] = {}
        self._sent: dict[str, Event] = {}

    @property
    def public_key(self) -> str:
        return self._public_key

    def add_received(self, event: Event) -> bool:
        """Buffer a received event. Returns False if its id was already buffered."""
        return self._add(self._received, event)

    def add_sent(self, event: Event) -> bool:
        """Buffer a sent event. Returns False if its id was already buffered."""
        return self._add(self._sent, event)

    @staticmethod
    def _add(buffer: dict[str, Event], event: Event) -> bool:
        if event.id in buffer:
            return False
        buffer[event.id] = event
        return True

    def clear(self) -> None:
        """Drop both buffers (subscription teardown)."""
        self._received.clear()
        self._sent.clear()

    def __len__(self) -> int:
        return len(self._received) + len(self._sent)

    def contacts(
        self,
        well_known_names: Mapping[str, str],
        login_time: int,
        seen_event_ids: Collection[str],
    ) -> Contacts:
        """Recompute [Contacts][nostrinbox.inbox.contacts.Contacts] from the buffers."""
        result = aggregate_contacts(
            self._public_key,
            well_known_names,
            login_time,
            seen_event_ids,
            self._received.values(),
            self._sent.values(),
        )
        _logger.debug(
            "contacts_recomputed",
            contacts=len(result.contact_keys),
            events=len(result.events),
            unread=result.unread_count,
        )
        return result
