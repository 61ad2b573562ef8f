import unittest

from . import interval_scanner
from .. import reference_types


def _scanner(*bounds: tuple[int, int]) -> interval_scanner.IntervalScanner:
    return interval_scanner.IntervalScanner.from_records(
        reference_types.IntervalRecord(interval=b, selection_mask=(i + 1, 0))
        for i, b in enumerate(bounds)
    )


class TestIntervalScanner(unittest.TestCase):
    def test_normalize(self):
        scanner = _scanner((210, 200), (100, 110))
        self.assertEqual(
            scanner.intervals,
            [
                interval_scanner.SelectionInterval(100, 110, (2, 0)),
                interval_scanner.SelectionInterval(200, 210, (1, 0)),
            ],
        )

    def test_simple_case(self):
        scanner = _scanner((100, 110))
        self.assertIsNone(scanner.find_overlapping(50, 50))
        self.assertEqual(scanner.find_overlapping(105, 105), 0)
        self.assertIsNone(scanner.find_overlapping(150, 150))
        self.assertEqual(scanner.cursor, 0)

    def test_closed_boundaries(self):
        scanner = _scanner((100, 110))
        self.assertEqual(scanner.find_overlapping(90, 100), 0)
        self.assertEqual(scanner.find_overlapping(110, 120), 0)
        self.assertIsNone(scanner.find_overlapping(111, 120))

    def test_cursor_advances(self):
        scanner = _scanner((100, 110), (200, 210), (300, 310))
        self.assertEqual(scanner.find_overlapping(105, 105), 0)
        self.assertEqual(scanner.cursor, 0)
        # Passes the first two, stops before the third.
        self.assertIsNone(scanner.find_overlapping(250, 250))
        self.assertEqual(scanner.cursor, 1)
        self.assertEqual(scanner.find_overlapping(305, 305), 2)
        self.assertEqual(scanner.cursor, 2)
        # Past the end.
        self.assertIsNone(scanner.find_overlapping(400, 400))
        self.assertEqual(scanner.cursor, 2)

    def test_reset(self):
        scanner = _scanner((100, 110), (200, 210))
        self.assertEqual(scanner.find_overlapping(205, 205), 1)
        # The cursor is a lower bound, so earlier intervals are missed.
        self.assertIsNone(scanner.find_overlapping(105, 105))
        scanner.reset()
        self.assertEqual(scanner.find_overlapping(105, 105), 0)

    def test_empty(self):
        scanner = _scanner()
        self.assertEqual(len(scanner), 0)
        self.assertIsNone(scanner.find_overlapping(0, 100))


if __name__ == "__main__":
    unittest.main()
