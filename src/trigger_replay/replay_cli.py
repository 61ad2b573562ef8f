import argparse
import json
import logging
import sys

from typing import Iterator, TextIO

from . import diagnostics
from . import reference_loader
from . import replay_config
from . import trigger_replay
from .utils import logging_utils
from .utils import misc_utils


def _read_timestamps(stream: TextIO) -> Iterator[int]:
    for line_number, line in enumerate(stream, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            yield int(line)
        except ValueError:
            raise ValueError(f"Line {line_number}: not an integer timestamp: {line!r}")


def run_replay(
    config: replay_config.ReplayConfig,
    timestamps: TextIO,
    output: TextIO,
) -> trigger_replay.TriggerReplay:
    reference_dir = misc_utils.ensure_not_none(
        config.reference_dir, err="Reference directory must be set."
    )
    run_id = misc_utils.ensure_not_none(config.run_id, err="Run id must be set.")

    reporter = diagnostics.DiagnosticsReporter(diagnostics.HistogramRegistry())
    replay = trigger_replay.TriggerReplay(reporter)
    replay.init_for_run(
        reference_loader.JsonReferenceLoader(reference_dir),
        run_id,
        config.timestamp,
        config.conditions,
        config.tolerance,
    )
    replay.populate_diagnostics(config.histogram_prefix)

    num_events = 0
    num_selected = 0
    for timestamp in _read_timestamps(timestamps):
        num_events += 1
        if replay.is_selected(timestamp):
            num_selected += 1
            print(timestamp, file=output)

    logging.info(f"{num_selected} of {num_events} events selected")
    for name, count in replay.condition_counts.items():
        logging.info(f"  {name}: {count}")
    return replay


def main():
    parser = argparse.ArgumentParser(
        description="Replay recorded trigger selections on a stream of event timestamps."
    )
    parser.add_argument("--reference-dir", type=str, help="Reference store directory.")
    parser.add_argument("--run", type=int, help="Run number.")
    parser.add_argument(
        "--timestamp", type=int, help="Point in time for the reference lookup."
    )
    parser.add_argument(
        "--conditions", type=str, help="Comma separated conditions of interest."
    )
    parser.add_argument("--tolerance", type=int, help="Query window half-width.")
    parser.add_argument(
        "--events",
        type=str,
        default="-",
        help="File with one timestamp per line, or - for stdin.",
    )
    parser.add_argument(
        "--diagnostics-out", type=str, help="Write diagnostic histograms as JSON here."
    )
    parser.add_argument("--log-dir", type=str, help="Also write the log here.")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    config = replay_config.ReplayConfig.from_env(
        reference_dir=args.reference_dir,
        run_id=args.run,
        timestamp=args.timestamp,
        conditions=args.conditions,
        tolerance=args.tolerance,
    )

    logging_utils.setup_logging(
        logging.DEBUG if args.verbose else logging.INFO,
        log_dir=args.log_dir,
        run_id=config.run_id,
    )

    try:
        if args.events == "-":
            replay = run_replay(config, sys.stdin, sys.stdout)
        else:
            with open(args.events, "r") as f:
                replay = run_replay(config, f, sys.stdout)
    except reference_loader.ReferenceNotFound as e:
        logging.error(str(e))
        sys.exit(1)

    if args.diagnostics_out:
        reporter = misc_utils.ensure_not_none(replay.reporter, err="No reporter.")
        with open(args.diagnostics_out, "w") as f:
            json.dump(reporter.summary(), f, indent=2)


if __name__ == "__main__":
    main()
