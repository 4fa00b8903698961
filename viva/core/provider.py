import datetime
import logging.config
import sys
import typing as t

from .logging import TRACE, TraceLogLevelLogger

TimestampProvider = t.Callable[..., datetime.datetime]


class LoggingProvider(object):
    """Configure stdlib logging from the ``logging`` settings section.

    Instantiated once by the container as a resource; in debug mode Python
    warnings are routed through logging as well.
    """

    def __init__(self, config: dict[str, t.Any], debug: bool):
        logging.addLevelName(TRACE, "TRACE")
        logging.setLoggerClass(TraceLogLevelLogger)
        logging.config.dictConfig(config)
        self.capture_warnings(debug)

    def get_logger(self, name: str | None = None) -> TraceLogLevelLogger:
        """Logger for ``name``, or for the calling module when omitted."""
        if name is None:
            name = sys._getframe(1).f_globals.get("__name__", "viva")  # pyright: ignore [reportPrivateUsage]
        return t.cast(TraceLogLevelLogger, logging.getLogger(name))

    @staticmethod
    def capture_warnings(capture: bool) -> None:
        logging.captureWarnings(capture)
