"""Unread-count notifications.

Consumers of the unread classifier surface the count in a window or process
title and play a sound when it grows. Both effects are external sinks
passed in as callables; this module only decides *when* to call them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from nostrinbox.core.logger import Logger


if TYPE_CHECKING:
    from collections.abc import Callable


def format_title(title: str, count: int) -> str:
    """``"{title}"`` when *count* is zero, else ``"{title} ({count})"``."""
    return f"{title} ({count})" if count > 0 else title


class UnreadStatus:
    """Pushes the unread count to a title sink and a sound sink.

    Args:
        process_id: Identifier passed through to ``set_title``.
        title: Base title.
        set_title: Called as ``set_title(process_id, formatted_title)`` on
            every update.
        play_sound: Called with no arguments when the count increases.
        initial_count: Count considered already announced.
    """

    def __init__(
        self,
        process_id: str,
        title: str,
        set_title: Callable[[str, str], None],
        play_sound: Callable[[], None],
        *,
        initial_count: int = 0,
    ) -> None:
        self._process_id = process_id
        self._title = title
        self._set_title = set_title
        self._play_sound = play_sound
        self._count = initial_count
        self._logger = Logger("nostrinbox.notifications")

    @property
    def count(self) -> int:
        return self._count

    def update(self, count: int) -> bool:
        """Record a new unread count.

        Returns:
            True if the count increased and the sound sink was called.
        """
        increased = count > self._count
        self._count = count

        try:
            self._set_title(self._process_id, format_title(self._title, count))
        except Exception as e:  # noqa: BLE001  # Sink boundary: a broken title sink must not stop updates
            self._logger.warning("title_update_failed", process_id=self._process_id, error=str(e))

        if increased:
            try:
                self._play_sound()
            except Exception as e:  # noqa: BLE001  # Sink boundary: audio failures are cosmetic
                self._logger.warning("notification_sound_failed", error=str(e))

        return increased
