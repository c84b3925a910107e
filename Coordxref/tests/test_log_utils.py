import logging
import os
import tempfile
import unittest
from ..configuration import CoordxrefConfiguration
from ..utilities import log_utils
from ..utilities.log_utils import ProgressLogger


class LoggerCreationTester(unittest.TestCase):

    def test_check_logger(self):
        logger = logging.getLogger("check")
        self.assertIs(log_utils.check_logger(logger), logger)
        with self.assertRaises(ValueError):
            log_utils.check_logger("logger")

    def test_null_logger(self):
        logger = log_utils.create_null_logger("null_test")
        self.assertEqual(logger.level, logging.CRITICAL)
        self.assertIsInstance(logger.handlers[0], logging.NullHandler)

    def test_default_logger(self):
        logger = log_utils.create_default_logger("default_test", level="INFO")
        self.assertEqual(logger.level, logging.INFO)
        self.assertEqual(len(logger.handlers), 1)
        self.assertFalse(logger.propagate)

    def test_logger_from_conf(self):
        config = CoordxrefConfiguration()
        with tempfile.TemporaryDirectory() as folder:
            config.log_settings.log = os.path.join(folder, "coordxref.log")
            config.log_settings.log_level = "DEBUG"
            logger = log_utils.create_logger_from_conf(config, name="conf_test", mode="w")
            logger.debug("A message")
            logger.handlers[0].close()
            with open(config.log_settings.log) as log:
                self.assertIn("A message", log.read())
        self.assertEqual(logger.level, logging.DEBUG)


class ProgressLoggerTester(unittest.TestCase):

    def setUp(self):
        self.logger = log_utils.create_null_logger("progress", level="DEBUG")
        self.progress = ProgressLogger(self.logger)

    def test_warning_count(self):
        with self.assertLogs(self.logger, level="WARNING") as cmo:
            self.progress.warning("first")
            self.progress.warning("second %s", "time", indent=1)
        self.assertEqual(self.progress.warning_count, 2)
        self.assertEqual(cmo.output, ["WARNING:progress:first", "WARNING:progress:  second time"])

    def test_error_has_no_prefix(self):
        with self.assertLogs(self.logger, level="ERROR") as cmo:
            self.progress.error("failed %d times", 2)
        self.assertEqual(cmo.output, ["ERROR:progress:failed 2 times"])
        self.assertEqual(self.progress.warning_count, 0)

    def test_log_progress(self):
        with self.assertLogs(self.logger, level="INFO") as cmo:
            for num in range(1, 101):
                self.progress.log_progress(100, num, incr=20)
        # The first 19, then 20, 40, 60, 80 and 100
        self.assertEqual(len(cmo.output), 24)
        self.assertEqual(cmo.output[-1], "INFO:progress:100/100 (100%)")
        self.assertEqual(cmo.output[0], "INFO:progress:1/100 (1%)")

    def test_log_progress_missing(self):
        with self.assertRaises(ValueError):
            self.progress.log_progress(None, 1)
        with self.assertRaises(ValueError):
            self.progress.log_progress(10, 0)

    def test_progressbar(self):
        self.progress.init_progressbar("bar", 40)
        with self.assertLogs(self.logger, level="INFO") as cmo:
            for num in range(1, 41):
                self.progress.log_progressbar("bar", num)
        # From 0% to 100%
        self.assertEqual(len(cmo.output), 21)
        self.assertEqual(cmo.output[0], "INFO:progress:[" + " " * 20 + "] 0%")
        self.assertEqual(cmo.output[4], "INFO:progress:[" + "=" * 4 + " " * 16 + "] 20%")
        self.assertEqual(cmo.output[-1], "INFO:progress:[" + "=" * 20 + "] 100%")

    def test_progressbar_invalid(self):
        with self.assertRaises(ValueError):
            self.progress.init_progressbar("", 10)
        with self.assertRaises(ValueError):
            self.progress.init_progressbar("bar", 0)

    def test_runtime(self):
        self.assertEqual(self.progress.runtime(), "n/a")
        with self.assertLogs(self.logger, level="INFO") as cmo:
            self.progress.init_log({"species": "homo_sapiens"})
            self.progress.finish_log()
        self.assertEqual(self.progress.runtime(), "0h 0min 0sec")
        self.assertTrue(any("species: homo_sapiens" in line for line in cmo.output))
        self.assertTrue(any("0 warnings." in line for line in cmo.output))

    def test_component(self):
        progress = ProgressLogger(self.logger, is_component=True)
        with self.assertLogs(self.logger, level="DEBUG") as cmo:
            progress.init_log({"species": "homo_sapiens"})
            progress.debug("done")
        self.assertEqual(cmo.output, ["DEBUG:progress:done"])


if __name__ == "__main__":
    unittest.main()
