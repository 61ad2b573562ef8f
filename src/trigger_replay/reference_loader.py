"""Access to the versioned store of per-run reference objects.

A reference snapshot is keyed by run number, and is valid from a point in
time. Lookups pick the latest snapshot that is valid at the requested
timestamp.
"""

import abc
import logging
import os

import pydantic

from . import reference_types

# Object names inside a snapshot directory.
SELECTION_COUNTERS = "SelectionCounters"
FILTER_COUNTERS = "FilterCounters"
INSPECTED_COUNTER = "InspectedEvents"
INTERVAL_RECORDS = "IntervalRecords"

_IntervalRecords = pydantic.TypeAdapter(list[reference_types.IntervalRecord])


class ReferenceNotFound(LookupError):
    """No reference snapshot exists for the requested run and timestamp."""

    def __init__(self, run_id: int, timestamp: int, detail: str = ""):
        message = f"No reference data for run {run_id} at timestamp {timestamp}"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.run_id = run_id
        self.timestamp = timestamp


class AbstractReferenceLoader(abc.ABC):
    @abc.abstractmethod
    def load_for_run(
        self, run_id: int, timestamp: int
    ) -> reference_types.ReferenceSnapshot:
        """Returns the snapshot for the run valid at timestamp.

        Raises:
            ReferenceNotFound: If there is no such snapshot.
        """
        raise NotImplementedError


class InMemoryReferenceLoader(AbstractReferenceLoader):
    def __init__(
        self, snapshots: dict[int, reference_types.ReferenceSnapshot] | None = None
    ):
        self._snapshots = dict(snapshots or {})
        self.load_count = 0

    def add(self, run_id: int, snapshot: reference_types.ReferenceSnapshot) -> None:
        self._snapshots[run_id] = snapshot

    def load_for_run(
        self, run_id: int, timestamp: int
    ) -> reference_types.ReferenceSnapshot:
        self.load_count += 1
        if run_id not in self._snapshots:
            raise ReferenceNotFound(run_id, timestamp)
        return self._snapshots[run_id]


class JsonReferenceLoader(AbstractReferenceLoader):
    """Reads snapshots from <base_dir>/<run_id>/<valid_from>/<object>.json."""

    def __init__(self, base_dir: str):
        self._base_dir = base_dir

    def _snapshot_dir(self, run_id: int, timestamp: int) -> str:
        run_dir = os.path.join(self._base_dir, str(run_id))
        if not os.path.isdir(run_dir):
            raise ReferenceNotFound(run_id, timestamp, f"{run_dir!r} does not exist")

        valid_from = [int(d) for d in os.listdir(run_dir) if d.isdigit()]
        candidates = [v for v in valid_from if v <= timestamp]
        if not candidates:
            raise ReferenceNotFound(
                run_id, timestamp, f"no snapshot valid yet, have {sorted(valid_from)}"
            )
        return os.path.join(run_dir, str(max(candidates)))

    def load_for_run(
        self, run_id: int, timestamp: int
    ) -> reference_types.ReferenceSnapshot:
        snapshot_dir = self._snapshot_dir(run_id, timestamp)

        def read(name: str) -> str:
            path = os.path.join(snapshot_dir, name + ".json")
            if not os.path.exists(path):
                raise ReferenceNotFound(run_id, timestamp, f"missing {path!r}")
            with open(path, "r") as f:
                return f.read()

        snapshot = reference_types.ReferenceSnapshot(
            selection_counters=reference_types.CounterTable.model_validate_json(
                read(SELECTION_COUNTERS)
            ),
            filter_counters=reference_types.CounterTable.model_validate_json(
                read(FILTER_COUNTERS)
            ),
            inspected_counter=reference_types.CounterTable.model_validate_json(
                read(INSPECTED_COUNTER)
            ),
            interval_records=_IntervalRecords.validate_json(read(INTERVAL_RECORDS)),
        )
        logging.info(
            f"Loaded reference for run {run_id} from {snapshot_dir!r}:"
            f" {len(snapshot.interval_records)} intervals"
        )
        return snapshot


def save_snapshot(
    base_dir: str,
    run_id: int,
    valid_from: int,
    snapshot: reference_types.ReferenceSnapshot,
) -> str:
    """Writes a snapshot in the layout read by JsonReferenceLoader."""
    snapshot_dir = os.path.join(base_dir, str(run_id), str(valid_from))
    os.makedirs(snapshot_dir, exist_ok=True)
    tables = {
        SELECTION_COUNTERS: snapshot.selection_counters,
        FILTER_COUNTERS: snapshot.filter_counters,
        INSPECTED_COUNTER: snapshot.inspected_counter,
    }
    for name, table in tables.items():
        with open(os.path.join(snapshot_dir, name + ".json"), "w") as f:
            f.write(table.model_dump_json(indent=2))
    with open(os.path.join(snapshot_dir, INTERVAL_RECORDS + ".json"), "wb") as f:
        f.write(_IntervalRecords.dump_json(snapshot.interval_records, indent=2))
    return snapshot_dir
