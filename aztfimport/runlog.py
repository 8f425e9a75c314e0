"""Run logger writing timestamped progress lines to a sink."""
import logging
import sys
from datetime import datetime
from typing import Optional, TextIO

from rich.console import Console

TIME_FORMAT = "%Y/%m/%d %H:%M:%S"
SDK_LOGGER_NAME = "aztfimport.sdk"
AZURE_LOGGER_NAME = "azure"

LEVEL_STYLES = {
    "DEBUG": "dim",
    "INFO": None,
    "WARN": "yellow",
    "ERROR": "bold red",
}


class RunLogger:
    """Leveled logger for a batch run.

    Every line is ``<prefix><timestamp> [LEVEL] <message>``. The logger
    writes to whatever text sink it is given; Azure SDK output never goes
    through it (see ``sdk_logger``).
    """

    def __init__(self, sink: Optional[TextIO] = None, prefix: str = "", debug: bool = False):
        self.sink = sink or sys.stderr
        self.prefix = prefix
        self.debug_enabled = debug
        self.console = Console(
            file=self.sink,
            highlight=False,
            markup=False,
            emoji=False,
            soft_wrap=True,
        )

    @classmethod
    def to_file(cls, path: str, prefix: str = "aztfimport ", debug: bool = False) -> "RunLogger":
        """Create a logger appending to a log file.

        Raises:
            OSError: If the file cannot be opened.
        """
        f = open(path, "a")
        return cls(f, prefix=prefix, debug=debug)

    def _log(self, level: str, message: str) -> None:
        timestamp = datetime.now().strftime(TIME_FORMAT)
        self.console.print(f"{self.prefix}{timestamp} [{level}] {message}", style=LEVEL_STYLES[level])

    def debug(self, message: str) -> None:
        if self.debug_enabled:
            self._log("DEBUG", message)

    def info(self, message: str) -> None:
        self._log("INFO", message)

    def warn(self, message: str) -> None:
        self._log("WARN", message)

    def error(self, message: str) -> None:
        self._log("ERROR", message)

    def close(self) -> None:
        if self.sink not in (sys.stderr, sys.stdout):
            self.sink.close()


def sdk_logger(level: int = logging.CRITICAL + 1) -> logging.Logger:
    """Logger handed to the Azure SDK clients.

    It has its own handler and does not propagate, so SDK output is dropped
    without touching the root logger or the run logger. The ``azure``
    namespace, which credentials and other SDK modules log through, is
    silenced the same way.
    """
    azure = logging.getLogger(AZURE_LOGGER_NAME)
    azure.propagate = False
    if not azure.handlers:
        azure.addHandler(logging.NullHandler())

    logger = logging.getLogger(SDK_LOGGER_NAME)
    logger.propagate = False
    logger.setLevel(level)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger
