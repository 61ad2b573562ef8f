import unittest

from . import condition_resolver
from . import reference_types

_TABLE = reference_types.CounterTable(
    labels=["total_analysed", "fast", "slow", "total_selected"],
    contents=[1000, 10, 20, 25],
)


class TestConditionResolver(unittest.TestCase):
    def test_parse_names(self):
        self.assertEqual(
            condition_resolver.parse_condition_names("  fast,slow ,, missing , "),
            ["fast", "slow", "missing"],
        )
        self.assertEqual(condition_resolver.parse_condition_names(""), [])
        self.assertEqual(condition_resolver.parse_condition_names(" , "), [])

    def test_resolve(self):
        conditions = condition_resolver.resolve_conditions(
            _TABLE, ["slow", "missing", "fast"]
        )
        self.assertEqual(
            conditions,
            [
                condition_resolver.ConditionOfInterest("slow", 1),
                condition_resolver.ConditionOfInterest(
                    "missing", condition_resolver.NOT_FOUND
                ),
                condition_resolver.ConditionOfInterest("fast", 0),
            ],
        )
        self.assertFalse(conditions[1].resolved)

    def test_totals_are_not_conditions(self):
        with self.assertLogs(level="WARNING"):
            conditions = condition_resolver.resolve_conditions(
                _TABLE, ["total_analysed", "total_selected"]
            )
        self.assertEqual(
            [c.bit for c in conditions],
            [condition_resolver.NOT_FOUND, condition_resolver.NOT_FOUND],
        )

    def test_bit_beyond_mask(self):
        labels = ["total"] + [f"c{i}" for i in range(130)] + ["selected"]
        table = reference_types.CounterTable(labels=labels, contents=[0] * len(labels))
        conditions = condition_resolver.resolve_conditions(table, ["c127", "c128"])
        self.assertEqual(
            [c.bit for c in conditions], [127, condition_resolver.NOT_FOUND]
        )


if __name__ == "__main__":
    unittest.main()
