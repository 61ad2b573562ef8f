"""Monotonic scanning of sorted, non-overlapping intervals.

For any given query window, find the first interval which overlaps it.

Queries are expected to arrive in increasing time order. The scanner keeps a
cursor on the last interval it matched or passed, so a monotonic stream of
queries costs amortized O(1) per query. This is not thread safe, each stream
of queries needs its own scanner.
"""

import dataclasses

from typing import Iterable

from .. import reference_types


@dataclasses.dataclass(frozen=True)
class SelectionInterval:
    start: int
    end: int
    selection_mask: tuple[int, int]


def normalize_intervals(
    records: Iterable[reference_types.IntervalRecord],
) -> list[SelectionInterval]:
    """Orders each record's boundaries, and sorts all by start."""
    intervals = [
        SelectionInterval(*record.bounds(), selection_mask=record.selection_mask)
        for record in records
    ]
    intervals.sort(key=lambda x: x.start)
    return intervals


class IntervalScanner:
    def __init__(self, intervals: list[SelectionInterval]):
        # Must already be normalized. May be shared by many scanners.
        self._intervals = intervals
        self.reset()

    @classmethod
    def from_records(
        cls, records: Iterable[reference_types.IntervalRecord]
    ) -> "IntervalScanner":
        return cls(normalize_intervals(records))

    def reset(self) -> None:
        self._cursor = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def intervals(self) -> list[SelectionInterval]:
        return self._intervals

    def __len__(self) -> int:
        return len(self._intervals)

    def __getitem__(self, index: int) -> SelectionInterval:
        return self._intervals[index]

    def find_overlapping(self, start: int, end: int) -> int | None:
        """Index of the first interval overlapping [start, end], if any.

        Intervals entirely before the window move the cursor forward. The scan
        stops at the first interval entirely after the window.
        """
        for i in range(self._cursor, len(self._intervals)):
            interval = self._intervals[i]
            if interval.end < start:
                self._cursor = i
            elif interval.start > end:
                break
            else:
                self._cursor = i
                return i
        return None
