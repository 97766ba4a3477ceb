"""
Unit tests for inbox.notifications module.

Tests:
- format_title() - title rendering with and without a count
- UnreadStatus.update() - title sink on every update, sound sink on increase
"""

from unittest.mock import MagicMock

import pytest

from nostrinbox.inbox.notifications import UnreadStatus, format_title


class TestFormatTitle:
    """format_title() rendering."""

    def test_zero_count(self):
        assert format_title("Messenger", 0) == "Messenger"

    @pytest.mark.parametrize(("count", "expected"), [(1, "Messenger (1)"), (42, "Messenger (42)")])
    def test_positive_count(self, count, expected):
        assert format_title("Messenger", count) == expected


class TestUnreadStatus:
    """UnreadStatus sink calls."""

    def _status(self, **kwargs):
        set_title = MagicMock()
        play_sound = MagicMock()
        status = UnreadStatus("messenger", "Messenger", set_title, play_sound, **kwargs)
        return status, set_title, play_sound

    def test_initial_count(self):
        status, _, _ = self._status()
        assert status.count == 0

    def test_increase_plays_sound(self):
        status, set_title, play_sound = self._status()

        assert status.update(2) is True

        set_title.assert_called_once_with("messenger", "Messenger (2)")
        play_sound.assert_called_once_with()
        assert status.count == 2

    def test_same_count_updates_title_only(self):
        status, set_title, play_sound = self._status(initial_count=2)

        assert status.update(2) is False

        set_title.assert_called_once_with("messenger", "Messenger (2)")
        play_sound.assert_not_called()

    def test_decrease_is_silent(self):
        status, set_title, play_sound = self._status(initial_count=3)

        assert status.update(0) is False

        set_title.assert_called_once_with("messenger", "Messenger")
        play_sound.assert_not_called()

    def test_sound_per_increase(self):
        status, _, play_sound = self._status()

        status.update(1)
        status.update(1)
        status.update(2)
        status.update(0)
        status.update(1)

        assert play_sound.call_count == 3

    def test_title_sink_failure_does_not_stop_sound(self):
        status, set_title, play_sound = self._status()
        set_title.side_effect = RuntimeError("no window")

        assert status.update(1) is True

        play_sound.assert_called_once()
        assert status.count == 1

    def test_sound_sink_failure_contained(self):
        status, _, play_sound = self._status()
        play_sound.side_effect = OSError("no audio device")

        assert status.update(1) is True
        assert status.count == 1
