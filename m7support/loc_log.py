"""Logging helpers of the location service: name tables, time stamps and a level-filtered logger."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Iterable, Mapping, Optional, Tuple, Union

from .msg_q import QueueStatus

UNKNOWN_STR = "UNKNOWN"

BOOL_STR = ("False", "True")
VOID_RET = "None"
FROM_AFW = "===>"
TO_MODEM = "--->"
FROM_MODEM = "<---"
TO_AFW = "<==="
EXIT_TAG = "Exiting"
ENTRY_TAG = "Entering"

VERBOSE = 5
"""Logging level used for verbose messages, below ``logging.DEBUG``."""

NameTable = Union[Mapping[str, int], Iterable[Tuple[str, int]]]
TimeValue = Union[float, int, datetime, None]


def _pairs(table: NameTable) -> Iterable[Tuple[str, int]]:
    if isinstance(table, Mapping):
        return table.items()
    return table


def name_from_mask(table: NameTable, mask: int) -> str:
    """Return the name of the first entry sharing a bit with ``mask``."""
    for name, value in _pairs(table):
        if value & mask:
            return name
    return UNKNOWN_STR


def name_from_val(table: NameTable, value: int) -> str:
    """Return the name of the first entry equal to ``value``."""
    for name, entry_value in _pairs(table):
        if entry_value == value:
            return name
    return UNKNOWN_STR


MSG_Q_STATUS_NAMES: Tuple[Tuple[str, int], ...] = (
    ("eMSG_Q_SUCCESS", QueueStatus.SUCCESS),
    ("eMSG_Q_FAILURE_GENERAL", QueueStatus.FAILURE_GENERAL),
    ("eMSG_Q_INVALID_PARAMETER", QueueStatus.INVALID_PARAMETER),
    ("eMSG_Q_INVALID_HANDLE", QueueStatus.INVALID_HANDLE),
    ("eMSG_Q_UNAVAILABLE_RESOURCE", QueueStatus.UNAVAILABLE_RESOURCE),
    ("eMSG_Q_INSUFFICIENT_BUFFER", QueueStatus.INSUFFICIENT_BUFFER),
)


def msg_q_status_name(status: int) -> str:
    """Return the name of a message queue status code."""
    return name_from_val(MSG_Q_STATUS_NAMES, int(status))


def succ_fail_string(is_succ: object) -> str:
    """Return ``"successful"`` or ``"failed"``."""
    return "successful" if is_succ else "failed"


def get_time(now: TimeValue = None) -> str:
    """Format local wall-clock time as ``HH:MM:SS.mmm``.

    ``now`` is a POSIX time or a datetime; by default the current time.
    """
    if now is None:
        now = time.time()
    moment = now if isinstance(now, datetime) else datetime.fromtimestamp(now)
    return f"{moment:%H:%M:%S}.{moment.microsecond // 1000:03d}"


def get_timestamp(now: TimeValue = None) -> str:
    """Format the time of day since the epoch as ``HH:MM:SS.uuuuuu``.

    ``now`` is a POSIX time or a datetime; by default the current time.
    """
    if now is None:
        now = time.time()
    if isinstance(now, datetime):
        now = now.timestamp()
    seconds, micros = divmod(int(round(now * 1_000_000)), 1_000_000)
    hours = seconds // 3600 % 24
    minutes = seconds % 3600 // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{micros:06d}"


class LocLogger:
    """Logger whose output depends on a numeric debug level.

    At level 0 or below each message goes out at its own level with a
    ``W/`` prefix; above that, messages at or under the debug level are
    raised to error level with their own prefix and the rest are dropped.
    Errors always go out. Each method returns the line it logged, or
    ``None`` if it was dropped.
    """

    def __init__(
        self,
        debug: int = 0,
        timestamp: int = 0,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.debug_level = debug
        self.timestamp = timestamp
        self._logger = logger or logging.getLogger("m7support.loc")

    def init(self, debug: int, timestamp: int) -> None:
        """Set the debug level and whether time stamps are wanted."""
        self.debug_level = debug
        self.timestamp = timestamp

    def _emit(self, level: int, prefix: str, message: str) -> str:
        line = prefix + message
        self._logger.log(level, line)
        return line

    def _filtered(self, threshold: int, prefix: str, quiet_level: int, message: str) -> Optional[str]:
        if self.debug_level >= threshold:
            return self._emit(logging.ERROR, prefix, message)
        if self.debug_level <= 0:
            return self._emit(quiet_level, "W/", message)
        return None

    def error(self, message: str) -> Optional[str]:
        """Log an error; always emitted."""
        return self._emit(logging.ERROR, "E/", message)

    def warning(self, message: str) -> Optional[str]:
        """Log a warning, shown from debug level 2."""
        return self._filtered(2, "W/", logging.WARNING, message)

    def info(self, message: str) -> Optional[str]:
        """Log an informational message, shown from debug level 3."""
        return self._filtered(3, "I/", logging.INFO, message)

    def debug(self, message: str) -> Optional[str]:
        """Log a debug message, shown from debug level 4."""
        return self._filtered(4, "D/", logging.DEBUG, message)

    def verbose(self, message: str) -> Optional[str]:
        """Log a verbose message, shown from debug level 5."""
        return self._filtered(5, "V/", VERBOSE, message)


loc_logger = LocLogger()


def logger_init(debug: int, timestamp: int) -> None:
    """Configure the shared :data:`loc_logger`."""
    loc_logger.init(debug, timestamp)