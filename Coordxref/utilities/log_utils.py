"""
Module which contains all functions related to logging.
"""


import datetime
import getpass
import logging
import os
import resource
import socket
import sys
import time
from dataclasses import field
from typing import Optional
from marshmallow import validate
from marshmallow_dataclass import dataclass


formatter = logging.Formatter(
        "{asctime} - {name} - {filename}:{lineno} - {levelname} - {funcName} \
- {processName} - {message}",
        style="{"
        )


null_logger = logging.getLogger("null")
null_handler = logging.NullHandler()
null_handler.setFormatter(formatter)
null_logger.setLevel(logging.CRITICAL)
null_logger.addHandler(null_handler)


@dataclass
class LoggingConfiguration:
    log: Optional[str] = field(default=None, metadata={
        "metadata": {"description": "Log file. If unset, messages will be printed to the standard error."},
    })
    log_level: str = field(default="INFO", metadata={
        "metadata": {"description": "Verbosity of the logs."},
        "validate": validate.OneOf(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    })


def create_null_logger(*args, **kwargs):
    """Static method to create a default logging instance.
    The default is a null handler (no log).

    :param instance: the instance used to derive a name for the logger. It must be either a string
    or a class instance with a __name__ attribute."""

    if len(args) > 0:
        null_special_logger = logging.getLogger(args[0])
        null_special_handler = logging.NullHandler()
        null_special_handler.setFormatter(formatter)
        null_special_logger.handlers = [null_special_handler]
        if "level" in kwargs:
            null_special_logger.setLevel(kwargs["level"])
        else:
            null_special_logger.setLevel(logging.CRITICAL)
        return null_special_logger

    return null_logger


def check_logger(logger):
    """Quick function to verify that a logger is really a logger,
    otherwise it raises a ValueError.

    :param logger: the logger instance
    :type logger: logging.Logger
    """

    if isinstance(logger, logging.Logger):
        return logger
    else:
        raise ValueError("{0} is not a logger but rather {1}".format(
            logger, type(logger)
        ))


def create_default_logger(name, level="WARN"):
    """Default logger
    :param name: string used to give a name to the logger.
    :type name: str

    :param level: level of the logger. Default: WARN
    """

    logger = logging.getLogger(name)
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False
    return logger


def create_logger_from_conf(conf, name="coordxref", mode="a"):

    """Create a logger following the log_settings section of a configuration object.

    :param conf: the configuration
    :type conf: Coordxref.configuration.CoordxrefConfiguration

    :param name: name of the logger
    :param mode: opening mode for the log file, if any.
    """

    logger = logging.getLogger(name)
    if conf.log_settings.log is None:
        handler = logging.StreamHandler()
    else:
        handler = logging.FileHandler(conf.log_settings.log, mode=mode)

    handler.setFormatter(formatter)
    logger.setLevel(conf.log_settings.log_level)
    logger.handlers = [handler]
    logger.propagate = False
    return logger


class ProgressLogger:

    """
    Wrapper around a logger which keeps track of the number of warnings emitted,
    of the run time, and which knows how to report the progress of long loops
    either as a counter ("12/200 (6%)") or as a 20-bin progress bar.
    Progress messages are emitted at the INFO level.
    """

    bins = 20

    def __init__(self, logger=None, is_component=False):

        """
        :param logger: the logger to wrap. If None, a null logger will be used.
        :type logger: (None|logging.Logger)

        :param is_component: if True, the script is run by another one and
        init_log will not print the header.
        :type is_component: bool
        """

        if logger is None:
            logger = create_null_logger()
        self.logger = check_logger(logger)
        self.is_component = is_component
        self.__warnings = 0
        self.__start_time = None
        self.__progress = dict()

    @staticmethod
    def _indent(msg, indent):
        return "  " * (indent or 0) + msg

    def error(self, msg, *args, indent=0):
        self.logger.error(self._indent(msg, indent), *args)

    def warning(self, msg, *args, indent=0):
        """Log a warning and increase the warning counter."""
        self.logger.warning(self._indent(msg, indent), *args)
        self.__warnings += 1

    def info(self, msg, *args, indent=0):
        self.logger.info(self._indent(msg, indent), *args)

    def debug(self, msg, *args, indent=0):
        self.logger.debug(self._indent(msg, indent), *args)

    @property
    def warning_count(self):
        """Number of warnings logged through this instance."""
        return self.__warnings

    def log_progress(self, max_val, curr, incr=20, indent=0, show_mem=False):

        """
        Log the progress of a loop as "curr/max (pct%)". The message is emitted
        for every multiple of incr, for each of the first 20 values and for the last one.

        :param max_val: total number of iterations
        :param curr: current iteration (1-based)
        :param incr: reporting increment
        :param indent: indentation level of the message
        :param show_mem: if True, the memory footprint is appended to the message
        """

        if not max_val or not curr:
            raise ValueError("You must provide a maximum and current value to log progress.")

        if (curr % incr) == 0 or curr < 20 or curr == max_val:
            mem = ", mem {}".format(self.mem()) if show_mem else ""
            self.info("%d/%d (%d%%%s)", curr, max_val, int(curr / max_val * 100), mem, indent=indent)

    def init_progressbar(self, name, max_val):

        """
        Initialise a progress bar with 20 bins (5% increments).

        :param name: name of the progress bar
        :param max_val: total number of iterations
        """

        if not name or not max_val:
            raise ValueError("You must provide a name and the maximum value for your progress bar")

        self.__progress[name] = {"max_val": max_val,
                                 "binsize": max_val / self.bins,
                                 "next": 0,
                                 "index": 0}

    def log_progressbar(self, name, curr, indent=0):

        """
        Log the state of a progress bar previously created with init_progressbar,
        if the next increment has been reached.

        :param name: name of the progress bar
        :param curr: current iteration
        :param indent: indentation level of the message
        """

        if not name or not curr:
            raise ValueError("You must provide a name and the current value for your progress bar")
        progress = self.__progress[name]
        if curr < int(progress["next"]):
            return

        index = progress["index"]
        self.info("[%s%s] %d%%", "=" * index, " " * (self.bins - index), index * 5, indent=indent)
        progress["index"] += 1
        progress["next"] += progress["binsize"]

    def init_log(self, params=None):

        """
        Print a header with the script name, date, user and, optionally,
        the parameters of the run. It also starts the runtime clock.
        :param params: parameters of the run, as a string or a dictionary
        """

        self.__start_time = time.time()
        if self.is_component:
            return
        script = "{}:{}".format(socket.gethostname(), os.path.abspath(sys.argv[0]))
        self.info("Script: %s", script)
        self.info("Date: %s", self.date())
        self.info("User: %s", getpass.getuser())
        if params:
            self.info("Parameters:")
            if isinstance(params, dict):
                for key in sorted(params):
                    self.info("%s: %s", key, params[key], indent=1)
            else:
                self.info("%s", params)

    def finish_log(self):
        """Print the footer with the warnings count, runtime and memory usage."""
        self.info("All done for %s.", os.path.basename(sys.argv[0]))
        self.info("%d warnings.", self.warning_count)
        self.info("Runtime: %s %s", self.runtime(), self.date_and_mem())

    def runtime(self):
        """Time elapsed since init_log, as "Xh Ymin Zsec"; "n/a" if the clock was not started."""

        if self.__start_time is None:
            return "n/a"
        diff = int(time.time() - self.__start_time)
        minutes, sec = divmod(diff, 60)
        hours, minutes = divmod(minutes, 60)
        return "{}h {}min {}sec".format(hours, minutes, sec)

    @staticmethod
    def date():
        return datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    @staticmethod
    def mem():
        """Peak resident memory of the process, in MB."""
        usage = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
        if sys.platform != "darwin":
            usage *= 1024
        return "{:.1f}MB".format(usage / 1024 ** 2)

    def date_and_mem(self):
        return "[{}, mem {}]".format(self.date(), self.mem())
