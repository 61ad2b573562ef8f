"""Monitoring histograms for replayed selections.

None of this affects the selection result. When no histograms are registered,
recording a hit does nothing.
"""

import logging

import numpy as np
from numpy import typing as npt

from . import condition_resolver
from . import reference_types

from typing import Any


class Histogram:
    """Labelled one dimensional histogram, with one bin per label."""

    def __init__(self, labels: list[str]):
        self.labels = list(labels)
        self.contents: npt.NDArray[np.float64] = np.zeros(len(labels))
        self.errors: npt.NDArray[np.float64] = np.zeros(len(labels))

    def fill(self, index: int, weight: float = 1.0) -> None:
        # Out of range fills are dropped, like under/overflow.
        if 0 <= index < len(self.labels):
            self.contents[index] += weight
            self.errors[index] = np.sqrt(self.errors[index] ** 2 + weight**2)

    def __len__(self) -> int:
        return len(self.labels)

    def as_dict(self) -> dict[str, float]:
        # Bins sharing a label are summed.
        result: dict[str, float] = {}
        for label, content in zip(self.labels, self.contents):
            result[label] = result.get(label, 0.0) + float(content)
        return result


class HistogramRegistry:
    def __init__(self) -> None:
        self._histograms: dict[str, Histogram] = {}

    def add(self, path: str, labels: list[str]) -> Histogram:
        if path in self._histograms:
            raise ValueError(f"Histogram {path!r} already registered")
        hist = Histogram(labels)
        self._histograms[path] = hist
        return hist

    def get(self, path: str) -> Histogram | None:
        return self._histograms.get(path)

    def paths(self) -> list[str]:
        return list(self._histograms)


class DiagnosticsReporter:
    def __init__(self, registry: HistogramRegistry):
        self._registry = registry
        self._run_id: int | None = None
        # Base paths of every run registered so far.
        self._registered: set[str] = set()
        self._analysed_triggers: Histogram | None = None
        self._analysed_triggers_of_interest: Histogram | None = None

    @property
    def registry(self) -> HistogramRegistry:
        return self._registry

    def register_histograms(
        self,
        run_id: int,
        prefix: str,
        snapshot: reference_types.ReferenceSnapshot,
        conditions: list[condition_resolver.ConditionOfInterest],
    ) -> None:
        """Registers the histograms for a run. Repeated calls for the same run do nothing.

        Returning to a run registered earlier records into its existing histograms.
        """
        if self._run_id == run_id:
            return
        self._run_id = run_id
        base = f"{run_id}/{prefix}"
        if base in self._registered:
            self._analysed_triggers = self._registry.get(base + "AnalysedTriggers")
            self._analysed_triggers_of_interest = self._registry.get(
                base + "AnalysedTriggersOfInterest"
            )
            return
        self._registered.add(base)

        selections = snapshot.selection_counters
        self._analysed_triggers = self._registry.add(
            base + "AnalysedTriggers", selections.interior_labels()
        )
        for name, table in [
            ("Selections", selections),
            ("Scalers", snapshot.filter_counters),
            ("InspectedEvents", snapshot.inspected_counter),
        ]:
            hist = self._registry.add(base + name, table.labels)
            hist.contents[:] = table.contents
            hist.errors[:] = table.errors

        self._analysed_triggers_of_interest = None
        if conditions:
            self._analysed_triggers_of_interest = self._registry.add(
                base + "AnalysedTriggersOfInterest", [c.name for c in conditions]
            )
        logging.info(
            f"Registered diagnostics for run {run_id} with {len(snapshot.interval_records)} intervals"
        )

    def record_condition_hit(self, bit: int) -> None:
        if self._analysed_triggers is not None:
            self._analysed_triggers.fill(bit)

    def record_trigger_of_interest_hit(self, index: int) -> None:
        if self._analysed_triggers_of_interest is not None:
            self._analysed_triggers_of_interest.fill(index)

    def summary(self) -> dict[str, Any]:
        return {
            path: hist.as_dict()
            for path in self._registry.paths()
            if (hist := self._registry.get(path)) is not None
        }
