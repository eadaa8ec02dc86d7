"""Unit tests for the bounded live readings window."""

from __future__ import annotations

import pytest

from models.live_buffer import LiveBuffer


def _reading(temperature: float, humidity: float) -> dict:
    return {"temperature": temperature, "humidity": humidity}


def test_new_buffer_is_empty() -> None:
    buffer: LiveBuffer[dict] = LiveBuffer()

    assert len(buffer) == 0
    assert buffer.contents() == []
    assert buffer.latest() is None
    assert buffer.capacity == 50


def test_two_readings_keep_arrival_order() -> None:
    buffer: LiveBuffer[dict] = LiveBuffer()

    buffer.receive(_reading(20, 50))
    buffer.receive(_reading(21, 51))

    assert buffer.contents() == [_reading(20, 50), _reading(21, 51)]
    assert buffer.latest() == _reading(21, 51)


@pytest.mark.parametrize("count", [0, 1, 49, 50, 51, 120])
def test_contents_are_last_min_n_events(count: int) -> None:
    buffer: LiveBuffer[int] = LiveBuffer()
    events = list(range(count))

    for event in events:
        buffer.receive(event)

    assert buffer.contents() == events[-50:]
    assert len(buffer) == min(count, 50)


def test_full_buffer_evicts_only_the_oldest() -> None:
    buffer: LiveBuffer[str] = LiveBuffer()
    for index in range(1, 51):
        buffer.receive(f"E{index}")

    buffer.receive("E51")

    assert buffer.contents() == [f"E{index}" for index in range(2, 52)]


def test_contents_returns_a_copy() -> None:
    buffer: LiveBuffer[int] = LiveBuffer(capacity=3)
    buffer.receive(1)

    snapshot = buffer.contents()
    snapshot.append(99)

    assert buffer.contents() == [1]
    assert list(buffer) == [1]


def test_custom_capacity_and_clear() -> None:
    buffer: LiveBuffer[int] = LiveBuffer(capacity=2)
    for value in (1, 2, 3):
        buffer.receive(value)

    assert buffer.contents() == [2, 3]

    buffer.clear()
    assert len(buffer) == 0


@pytest.mark.parametrize("capacity", [0, -5])
def test_capacity_must_be_positive(capacity: int) -> None:
    with pytest.raises(ValueError):
        LiveBuffer(capacity=capacity)
