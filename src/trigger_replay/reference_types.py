import pydantic

from typing import Annotated

# Unsigned 64-bit word of a selection mask.
MaskWord = Annotated[int, pydantic.Field(ge=0, lt=1 << 64)]


class IntervalRecord(pydantic.BaseModel):
    # The two boundaries come from independent sources, and are not guaranteed
    # to be ordered.
    interval: tuple[int, int]
    # Word 0 holds bits 0-63, word 1 holds bits 64-127.
    selection_mask: tuple[MaskWord, MaskWord] = (0, 0)

    def bounds(self) -> tuple[int, int]:
        a, b = self.interval
        return min(a, b), max(a, b)


class CounterTable(pydantic.BaseModel):
    """Labelled counters, stored bin by bin.

    For the selection counters the first bin is the total number of analysed
    events, the last bin the total number of selected events, and the bins in
    between are the named selection conditions.
    """

    labels: list[str]
    contents: list[float]
    errors: list[float] = []

    @pydantic.model_validator(mode="after")
    def _check_bins(self) -> "CounterTable":
        if len(self.labels) != len(self.contents):
            raise ValueError(
                f"{len(self.labels)} labels but {len(self.contents)} bin contents"
            )
        if not self.errors:
            self.errors = [0.0] * len(self.contents)
        elif len(self.errors) != len(self.contents):
            raise ValueError(
                f"{len(self.errors)} bin errors but {len(self.contents)} bin contents"
            )
        if len(set(self.labels)) != len(self.labels):
            raise ValueError(f"Duplicate labels in {self.labels}")
        return self

    @property
    def num_bins(self) -> int:
        return len(self.labels)

    def interior_labels(self) -> list[str]:
        # Excludes the first and last bins, which are totals.
        return self.labels[1:-1]


class ReferenceSnapshot(pydantic.BaseModel):
    selection_counters: CounterTable
    filter_counters: CounterTable
    inspected_counter: CounterTable
    interval_records: list[IntervalRecord]
