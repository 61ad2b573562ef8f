import io
import tempfile
import unittest

from . import reference_loader
from . import reference_types
from . import replay_cli
from . import replay_config


class TestRunReplay(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmpdir.cleanup)
        snapshot = reference_types.ReferenceSnapshot(
            selection_counters=reference_types.CounterTable(
                labels=["total_analysed", "fast", "slow", "total_selected"],
                contents=[100, 3, 4, 6],
            ),
            filter_counters=reference_types.CounterTable(labels=["f"], contents=[1]),
            inspected_counter=reference_types.CounterTable(labels=["n"], contents=[2]),
            interval_records=[
                reference_types.IntervalRecord(
                    interval=(100, 110), selection_mask=(1, 0)
                ),
                reference_types.IntervalRecord(
                    interval=(210, 200), selection_mask=(2, 0)
                ),
            ],
        )
        reference_loader.save_snapshot(self._tmpdir.name, 9, 0, snapshot)

    def _config(self, **kwargs) -> replay_config.ReplayConfig:
        values = dict(
            reference_dir=self._tmpdir.name,
            run_id=9,
            timestamp=100,
            conditions="slow",
            tolerance=0,
        )
        values.update(kwargs)
        return replay_config.ReplayConfig(**values)

    def test_selected_events(self):
        output = io.StringIO()
        events = io.StringIO("# events\n105\n150\n\n205\n208\n300\n")
        replay = replay_cli.run_replay(self._config(), events, output)
        self.assertEqual(output.getvalue().split(), ["205", "208"])
        self.assertEqual(replay.condition_counts, {"slow": 1})

        assert replay.reporter is not None
        summary = replay.reporter.summary()
        self.assertEqual(summary["9/AnalysedTriggers"], {"fast": 1.0, "slow": 1.0})

    def test_missing_run(self):
        with self.assertRaises(reference_loader.ReferenceNotFound):
            replay_cli.run_replay(
                self._config(run_id=10), io.StringIO(""), io.StringIO()
            )

    def test_unset_reference_dir(self):
        with self.assertRaises(ValueError):
            replay_cli.run_replay(
                self._config(reference_dir=None), io.StringIO(""), io.StringIO()
            )

    def test_bad_timestamp(self):
        with self.assertRaises(ValueError):
            replay_cli.run_replay(self._config(), io.StringIO("abc\n"), io.StringIO())


if __name__ == "__main__":
    unittest.main()
