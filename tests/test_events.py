import dataclasses

import pytest

from cachesim.events import AccessEvent


def test_key_is_kept():
    assert AccessEvent(42).key == 42


def test_events_with_same_key_are_equal():
    assert AccessEvent(7) == AccessEvent(7)
    assert AccessEvent(7) != AccessEvent(8)


def test_events_are_hashable():
    assert len({AccessEvent(1), AccessEvent(1), AccessEvent(2)}) == 2


def test_event_is_immutable():
    event = AccessEvent(3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        event.key = 4  # type: ignore[misc]
    assert event.key == 3