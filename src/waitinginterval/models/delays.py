"""Delay sequences and the cursor that walks them back to front.

A delay sequence is read last element first; once index 0 is reached the
first element is repeated forever. For example (16, 8, 4, 2) yields
2, 4, 8, 16, 16, 16, ...
"""
from __future__ import annotations

import math
from datetime import timedelta
from numbers import Real
from typing import Iterable, Iterator, Tuple, Union

from ..errors import InvalidArgument

# Seconds as a number, or a timedelta
DelayValue = Union[int, float, timedelta]
Delays = Tuple[float, ...]


def _to_seconds(value: object) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    # bool is a Real subclass but never a meaningful delay
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidArgument(f"Delay must be a number of seconds or a timedelta, got {value!r}")
    return float(value)


def normalize_delays(delays: Iterable[DelayValue]) -> Delays:
    """Validate a delay sequence and return it as a tuple of float seconds.

    Raises
    ------
    InvalidArgument if the sequence is empty, or any element is negative, NaN, infinite or
    not a number/timedelta.
    """
    if isinstance(delays, (str, bytes)):
        raise InvalidArgument("Delays must be a sequence of numbers, not a string")
    try:
        values = tuple(_to_seconds(v) for v in delays)
    except TypeError as e:
        raise InvalidArgument(f"Delays must be iterable: {e}") from e
    if not values:
        raise InvalidArgument("Delay sequence must not be empty")
    for v in values:
        if not math.isfinite(v) or v < 0:
            raise InvalidArgument(f"Delays must be finite and non-negative, got {v}")
    return values


def next_delay(delays: Delays, index: int) -> Tuple[float, int]:
    """Return (delay, next_index) for a cursor positioned at index.

    While index > 0 the element at index is returned and the cursor moves one
    step toward the front; at index 0 the first element is returned and the
    cursor stays put.
    """
    if index > 0:
        return delays[index], index - 1
    return delays[0], 0


class DelayCursor:
    """Per-registration position in a delay sequence.

    Not restartable and not meant to be shared between registrations.
    """

    def __init__(self, delays: Iterable[DelayValue]) -> None:
        self.delays: Delays = normalize_delays(delays)
        self.index = len(self.delays) - 1

    def next(self) -> float:
        value, self.index = next_delay(self.delays, self.index)
        return value

    def peek(self) -> float:
        return next_delay(self.delays, self.index)[0]

    @property
    def exhausted(self) -> bool:
        """True once only the floor delay (element 0) remains."""
        return self.index == 0

    def __iter__(self) -> Iterator[float]:
        while True:
            yield self.next()

    def __repr__(self) -> str:
        return f"DelayCursor(delays={self.delays!r}, index={self.index})"
