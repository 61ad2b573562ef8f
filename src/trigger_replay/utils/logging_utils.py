import datetime
import logging
import os

_FORMAT = "%(asctime)s %(levelname)s: [%(filename)s:%(lineno)d] %(message)s"
_DATEFMT = "%H:%M:%S"


class _ColorFormatter(logging.Formatter):
    ORANGE = "\033[33m"
    RED = "\033[91m"
    RESET = "\033[0m"

    def format(self, record):
        line = super().format(record)
        if record.levelno >= logging.ERROR:
            return f"{self.RED}{line}{self.RESET}"
        if record.levelno == logging.WARNING:
            return f"{self.ORANGE}{line}{self.RESET}"
        return line


def replay_log_path(log_dir: str, run_id: int | None) -> str:
    """One log file per replay session, named after the run."""
    timestamp = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    run_part = f"run{run_id}" if run_id is not None else "norun"
    return os.path.join(log_dir, f"replay_{run_part}_{timestamp}.txt")


def setup_logging(
    level=logging.INFO, log_dir: str | None = None, run_id: int | None = None
) -> None:
    # Logs go to stderr, stdout carries the selected events.
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(_ColorFormatter(_FORMAT, _DATEFMT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [console_handler]

    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(
            replay_log_path(log_dir, run_id), encoding="utf-8"
        )
        file_handler.setFormatter(logging.Formatter(_FORMAT, _DATEFMT))
        root_logger.addHandler(file_handler)


def _demo():
    setup_logging(log_dir=None)
    logging.info("Replay started.")
    logging.warning("Condition 'missing' is not in the selection table.")
    logging.error("No reference data for run 0.")


if __name__ == "__main__":
    _demo()
