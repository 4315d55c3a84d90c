"""
Level-filtered logging for larkit.

Every component logs through the standard library `logging` module. A
LoggerProxy sits in front of the stdlib logger so that a Client, an
EventDispatcher or a WSSession can be made quieter (or chattier) than the
application's global logging configuration without touching it.

Levels are ordered the same way the platform's other SDKs order them:
a proxy at INFO forwards fatal, error, warn and info calls and drops
debug and trace.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class LoggerLevel(IntEnum):
    """SDK log levels, from least to most verbose."""

    FATAL = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5

    @property
    def stdlib_level(self) -> int:
        """Matching `logging` level number."""
        return _STDLIB_LEVELS[self]


_STDLIB_LEVELS = {
    LoggerLevel.FATAL: logging.CRITICAL,
    LoggerLevel.ERROR: logging.ERROR,
    LoggerLevel.WARN: logging.WARNING,
    LoggerLevel.INFO: logging.INFO,
    LoggerLevel.DEBUG: logging.DEBUG,
    LoggerLevel.TRACE: TRACE,
}


class LoggerProxy:
    """
    Forward log calls to a stdlib logger when the proxy level allows it.

    Example:
        log = LoggerProxy(LoggerLevel.DEBUG, logging.getLogger("larkit"))
        log.debug("use domain url: %s", domain)
        log.trace("dropped, TRACE is more verbose than DEBUG")
    """

    def __init__(
        self,
        level: LoggerLevel = LoggerLevel.INFO,
        logger: logging.Logger | None = None,
    ):
        self.level = LoggerLevel(level)
        self.logger = logger or logging.getLogger("larkit")

    def enabled(self, level: LoggerLevel) -> bool:
        return self.level >= level

    def _log(self, level: LoggerLevel, msg: Any, *args: Any, **kwargs: Any) -> None:
        if self.enabled(level):
            self.logger.log(level.stdlib_level, msg, *args, **kwargs)

    def fatal(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self._log(LoggerLevel.FATAL, msg, *args, **kwargs)

    def error(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self._log(LoggerLevel.ERROR, msg, *args, **kwargs)

    def warn(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self._log(LoggerLevel.WARN, msg, *args, **kwargs)

    warning = warn

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self._log(LoggerLevel.INFO, msg, *args, **kwargs)

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self._log(LoggerLevel.DEBUG, msg, *args, **kwargs)

    def trace(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self._log(LoggerLevel.TRACE, msg, *args, **kwargs)
