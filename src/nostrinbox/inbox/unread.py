"""Unread classification.

An event is unread when all three hold:

* it was not authored by the active key;
* its ``created_at`` is strictly after the session login time;
* its id is not in the caller's seen set.

The seen set is taken as given on every call; marking events read and
persisting that state is the caller's job.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from nostrinbox.models.event import Event


def is_unread(
    event: Event,
    public_key: str,
    login_time: int,
    seen_event_ids: Collection[str],
) -> bool:
    """Return True if *event* counts as unread for *public_key*."""
    return (
        event.pubkey != public_key
        and event.created_at > login_time
        and event.id not in seen_event_ids
    )


def classify_unread(
    events: Iterable[Event],
    public_key: str,
    login_time: int,
    seen_event_ids: Collection[str],
) -> tuple[Event, ...]:
    """Return the unread subsequence of *events*, preserving order.

    An empty *public_key* (session key not resolved yet) yields no unread
    events.
    """
    if not public_key:
        return ()
    seen = seen_event_ids if isinstance(seen_event_ids, (set, frozenset)) else set(seen_event_ids)
    return tuple(event for event in events if is_unread(event, public_key, login_time, seen))
