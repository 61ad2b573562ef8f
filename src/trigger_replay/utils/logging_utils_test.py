import logging
import os
import tempfile
import unittest

from . import logging_utils


class TestLoggingUtils(unittest.TestCase):
    def setUp(self):
        root_logger = logging.getLogger()
        saved_handlers, saved_level = root_logger.handlers[:], root_logger.level

        def restore():
            for handler in root_logger.handlers:
                handler.close()
            root_logger.handlers = saved_handlers
            root_logger.setLevel(saved_level)

        self.addCleanup(restore)

    def test_log_path(self):
        path = logging_utils.replay_log_path("/logs", 523308)
        self.assertEqual(os.path.dirname(path), "/logs")
        self.assertTrue(os.path.basename(path).startswith("replay_run523308_"))
        self.assertIn("_norun_", logging_utils.replay_log_path("/logs", None))

    def test_file_log(self):
        with tempfile.TemporaryDirectory() as log_dir:
            logging_utils.setup_logging(logging.DEBUG, log_dir=log_dir, run_id=7)
            logging.debug("rescanning")
            for handler in logging.getLogger().handlers:
                handler.flush()
            (log_file,) = os.listdir(log_dir)
            with open(os.path.join(log_dir, log_file)) as f:
                self.assertIn("rescanning", f.read())
            for handler in logging.getLogger().handlers:
                handler.close()
            logging.getLogger().handlers = []


if __name__ == "__main__":
    unittest.main()
