"""Maps condition names to bit positions in the selection mask.

Names are resolved against the labels of the selection counter table loaded
for the run, since the set of conditions changes from run to run.
"""

import dataclasses
import logging

from . import bitmask
from . import reference_types
from .utils import misc_utils

# Bit index of a condition that is not in the table.
NOT_FOUND = -1


@dataclasses.dataclass(frozen=True)
class ConditionOfInterest:
    name: str
    bit: int

    @property
    def resolved(self) -> bool:
        return self.bit != NOT_FOUND


def parse_condition_names(text: str) -> list[str]:
    return misc_utils.split_tokens(text, ",")


def _find_bit(table: reference_types.CounterTable, name: str) -> int:
    for bit, label in enumerate(table.interior_labels()):
        if label == name:
            if bit >= bitmask.NUM_BITS:
                logging.warning(
                    f"Condition {name!r} at bit {bit} does not fit in the mask"
                )
                return NOT_FOUND
            return bit
    return NOT_FOUND


def resolve_conditions(
    table: reference_types.CounterTable, names: list[str]
) -> list[ConditionOfInterest]:
    """Resolves each name, keeping the unresolved ones with NOT_FOUND."""
    conditions = [ConditionOfInterest(name, _find_bit(table, name)) for name in names]
    for condition in conditions:
        if not condition.resolved:
            logging.warning(
                f"Condition {condition.name!r} is not in the selection table, it will never fire"
            )
    return conditions
