"""Replays recorded trigger selections against an event stream.

For each event timestamp, the recorded selection intervals of the run are
searched for one overlapping the event, and the selection mask of that
interval tells which conditions fired.

Usage:
    replay = trigger_replay.TriggerReplay()
    replay.init_for_run(loader, run_id, timestamp, "fast, slow", tolerance=100)
    for event_time in event_times:  # In increasing order.
        if replay.is_selected(event_time):
            ...

A TriggerReplay keeps a cursor for the stream it is fed, and must not be
shared across threads. Independent streams should use one TriggerReplay
each; they may share the same RunReference.
"""

import dataclasses
import logging

from . import bitmask
from . import condition_resolver
from . import diagnostics
from . import reference_loader
from . import reference_types
from .utils import interval_scanner


@dataclasses.dataclass(frozen=True)
class RunReference:
    """Reference data of one run, read-only once loaded."""

    run_id: int
    snapshot: reference_types.ReferenceSnapshot
    intervals: list[interval_scanner.SelectionInterval]

    @classmethod
    def load(
        cls,
        loader: reference_loader.AbstractReferenceLoader,
        run_id: int,
        timestamp: int,
    ) -> "RunReference":
        snapshot = loader.load_for_run(run_id, timestamp)
        return cls(
            run_id=run_id,
            snapshot=snapshot,
            intervals=interval_scanner.normalize_intervals(snapshot.interval_records),
        )

    @property
    def condition_table(self) -> reference_types.CounterTable:
        return self.snapshot.selection_counters


class TriggerReplay:
    def __init__(self, reporter: diagnostics.DiagnosticsReporter | None = None):
        self._reporter = reporter
        self._clear()

    def _clear(self) -> None:
        self._reference: RunReference | None = None
        self._scanner = interval_scanner.IntervalScanner([])
        self._conditions: list[condition_resolver.ConditionOfInterest] = []
        self._counts: list[int] = []
        self._tolerance = 0
        self._last_timestamp: int | None = None
        self._last_matched: int | None = None
        self._new_match = False
        self._last_result = bitmask.SelectionBits()

    def init_for_run(
        self,
        loader: reference_loader.AbstractReferenceLoader,
        run_id: int,
        timestamp: int,
        conditions: str | list[str],
        tolerance: int,
    ) -> list[int]:
        """Loads the run's reference data, unless it is already loaded.

        Returns:
            The bit of each condition of interest, -1 for unresolved ones.

        Raises:
            reference_loader.ReferenceNotFound: If the run has no reference
                data. No state of a previous run is kept in that case.
        """
        if self._reference is not None and self._reference.run_id == run_id:
            return self.condition_bits()
        try:
            reference = RunReference.load(loader, run_id, timestamp)
        except reference_loader.ReferenceNotFound:
            self._clear()
            raise
        return self.attach(reference, conditions, tolerance)

    def attach(
        self,
        reference: RunReference,
        conditions: str | list[str],
        tolerance: int,
    ) -> list[int]:
        """Starts replaying against an already loaded run."""
        if tolerance < 0:
            raise ValueError(f"Tolerance must be non-negative, got {tolerance}")
        if isinstance(conditions, str):
            conditions = condition_resolver.parse_condition_names(conditions)

        self._clear()
        self._reference = reference
        self._scanner = interval_scanner.IntervalScanner(reference.intervals)
        self._conditions = condition_resolver.resolve_conditions(
            reference.condition_table, conditions
        )
        self._counts = [0] * len(self._conditions)
        self._tolerance = tolerance

        logging.info(
            f"Trigger replay initialized for run {reference.run_id}, conditions of interest:"
        )
        for condition in self._conditions:
            logging.info(f">>> {condition.name} : {condition.bit}")
        return self.condition_bits()

    def populate_diagnostics(self, prefix: str = "") -> None:
        if self._reporter is None or self._reference is None:
            return
        self._reporter.register_histograms(
            self._reference.run_id,
            prefix,
            self._reference.snapshot,
            self._conditions,
        )

    def fetch(
        self, timestamp: int, tolerance: int | None = None
    ) -> bitmask.SelectionBits:
        """Selection bits of the interval overlapping the timestamp.

        Returns all zero bits if no interval is within tolerance.
        """
        if tolerance is None:
            tolerance = self._tolerance
        if tolerance < 0:
            raise ValueError(f"Tolerance must be non-negative, got {tolerance}")

        self._last_result = bitmask.SelectionBits()
        self._new_match = False
        if self._last_timestamp is not None and timestamp < self._last_timestamp:
            logging.debug(
                f"Timestamp {timestamp} before previous {self._last_timestamp}, rescanning"
            )
            self._scanner.reset()
        self._last_timestamp = timestamp

        index = self._scanner.find_overlapping(
            timestamp - tolerance, timestamp + tolerance
        )
        if index is None:
            return self._last_result

        self._last_result = bitmask.SelectionBits.from_words(
            self._scanner[index].selection_mask
        )
        self._new_match = index != self._last_matched
        self._last_matched = index
        if self._new_match and self._reporter is not None:
            for bit in self._last_result.set_bits():
                self._reporter.record_condition_hit(bit)
        return self._last_result

    def is_selected(self, timestamp: int, tolerance: int | None = None) -> bool:
        """Whether any resolved condition of interest fired for the timestamp.

        The first condition that fired is counted once per newly matched
        interval. An interval is new when it differs from the last interval
        matched, so the first match after loading a run always counts, and
        rewinding onto the interval matched last does not.
        """
        result = self.fetch(timestamp, tolerance)
        for i, condition in enumerate(self._conditions):
            if not condition.resolved or not result.test(condition.bit):
                continue
            # Repeated queries on the same interval count once.
            if self._new_match:
                self._counts[i] += 1
                if self._reporter is not None:
                    self._reporter.record_trigger_of_interest_hit(i)
            return True
        return False

    def condition_bits(self) -> list[int]:
        return [c.bit for c in self._conditions]

    @property
    def run_id(self) -> int | None:
        return self._reference.run_id if self._reference is not None else None

    @property
    def reporter(self) -> diagnostics.DiagnosticsReporter | None:
        return self._reporter

    @property
    def reference(self) -> RunReference | None:
        return self._reference

    @property
    def conditions(self) -> list[condition_resolver.ConditionOfInterest]:
        return list(self._conditions)

    @property
    def condition_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for condition, count in zip(self._conditions, self._counts):
            counts[condition.name] = counts.get(condition.name, 0) + count
        return counts

    @property
    def counts(self) -> list[int]:
        return list(self._counts)

    @property
    def cursor(self) -> int:
        return self._scanner.cursor

    @property
    def last_result(self) -> bitmask.SelectionBits:
        return self._last_result
