from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator


def day_of_week(day: date) -> int:
    """Day index with Sunday = 0 through Saturday = 6."""

    return day.isoweekday() % 7


@dataclass(frozen=True, slots=True)
class DateWindow:
    """Every calendar date from ``start`` to ``end`` inclusive.

    Iterating yields dates lazily; the window can be iterated any number of
    times. A window whose end precedes its start is empty.
    """

    start: date
    end: date

    def __iter__(self) -> Iterator[date]:
        delta = (self.end - self.start).days
        for index in range(delta + 1):
            yield self.start + timedelta(days=index)

    def __len__(self) -> int:
        return max((self.end - self.start).days + 1, 0)

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.start <= day <= self.end

    @property
    def is_empty(self) -> bool:
        return self.end < self.start


def date_window(start: date, end: date) -> DateWindow:
    return DateWindow(start=start, end=end)
