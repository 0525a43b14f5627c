"""Reading of ``NAME = VALUE`` configuration files into parameter tables."""

from __future__ import annotations

import enum
import os
import re
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional, TextIO, Tuple, Union

from .loc_log import loc_logger

LOC_MAX_PARAM_NAME = 48
LOC_MAX_PARAM_STRING = 80
LOC_MAX_PARAM_LINE = 80
GPS_CONF_FILE = "/etc/gps.conf"

DEFAULT_DEBUG_LEVEL = 3
DEFAULT_TIMESTAMP = 0

_C_SPACE = " \t\n\v\f\r"
_INT_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_HEX_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]+)")
_FLOAT_RE = re.compile(
    r"[ \t\n\v\f\r]*([+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


class ParamType(enum.Enum):
    """Kind of value a configuration parameter holds."""

    NUMBER = "n"
    STRING = "s"
    FLOAT = "f"


@dataclass(frozen=True)
class ConfigValue:
    """One parsed ``NAME = VALUE`` line, with the value read every way."""

    name: str
    str_value: str
    int_value: int = 0
    double_value: float = 0.0


@dataclass
class ConfigParam:
    """A named parameter that a configuration file may set."""

    name: str
    param_type: ParamType
    value: Any = None
    is_set: bool = False

    def __post_init__(self) -> None:
        try:
            self.param_type = ParamType(self.param_type)
        except ValueError:
            loc_logger.error(f"PARAM {self.name} parameter type must be n, f, or s")
            raise

    def apply(self, value: ConfigValue) -> bool:
        """Take ``value`` if it names this parameter; return whether it did."""
        if value.name != self.name:
            return False
        if self.param_type is ParamType.STRING:
            text = value.str_value
            self.value = "" if text == "NULL" else text[:LOC_MAX_PARAM_STRING]
            loc_logger.debug(f"apply: PARAM {self.name} = {self.value}")
        elif self.param_type is ParamType.NUMBER:
            self.value = value.int_value
            loc_logger.debug(f"apply: PARAM {self.name} = {self.value}")
        else:
            self.value = value.double_value
            loc_logger.debug(f"apply: PARAM {self.name} = {self.value:f}")
        self.is_set = True
        return True


def trim_space(text: str) -> str:
    """Remove leading and trailing white space.

    A string made only of white space is returned unchanged.
    """
    stripped = text.strip(_C_SPACE)
    return stripped if stripped else text


def _atoi(text: str) -> int:
    match = _INT_RE.match(text)
    return int(match.group(1)) if match else 0


def _atof(text: str) -> float:
    match = _FLOAT_RE.match(text)
    if not match:
        return 0.0
    try:
        return float(match.group(1))
    except ValueError:
        return 0.0


def _hex(text: str) -> int:
    match = _HEX_RE.match(text)
    if not match:
        return 0
    number = int(match.group(2), 16)
    return -number if match.group(1) == "-" else number


def parse_value(name: str, text: str) -> ConfigValue:
    """Read ``text`` as a string, an integer and a float.

    Text starting ``0x`` is read as a hexadecimal integer and its float
    value is left at zero.
    """
    if len(text) >= 2 and text[0] == "0" and text[1].lower() == "x":
        return ConfigValue(name, text, int_value=_hex(text[2:]))
    return ConfigValue(name, text, int_value=_atoi(text), double_value=_atof(text))


loc_parameters: Tuple[ConfigParam, ...] = (
    ConfigParam("DEBUG_LEVEL", ParamType.NUMBER, DEFAULT_DEBUG_LEVEL),
    ConfigParam("TIMESTAMP", ParamType.NUMBER, DEFAULT_TIMESTAMP),
)


def _parameter(name: str) -> ConfigParam:
    return next(param for param in loc_parameters if param.name == name)


def _default_parameters() -> None:
    _parameter("DEBUG_LEVEL").value = DEFAULT_DEBUG_LEVEL
    _parameter("TIMESTAMP").value = DEFAULT_TIMESTAMP
    _init_logger()


def _init_logger() -> None:
    loc_logger.init(_parameter("DEBUG_LEVEL").value, _parameter("TIMESTAMP").value)


def _chunks(stream: TextIO) -> Iterator[str]:
    """Yield the file in pieces no longer than a line buffer holds."""
    size = LOC_MAX_PARAM_LINE - 1
    for line in stream:
        while line:
            yield line[:size]
            line = line[size:]


def _split(chunk: str) -> Optional[Tuple[str, str]]:
    tokens = [token for token in chunk.split("=") if token]
    if len(tokens) < 2:
        return None
    return tokens[0], tokens[1]


def read_conf(
    path: Union[str, "os.PathLike[str]"],
    table: Optional[Iterable[ConfigParam]] = None,
) -> bool:
    """Read the configuration file at ``path`` into ``table``.

    The logging parameters ``DEBUG_LEVEL`` and ``TIMESTAMP`` are reset to
    their defaults, then set from the file as well. Returns whether the
    file could be read.
    """
    params = list(table) if table is not None else []
    _default_parameters()

    try:
        stream = open(path, "r", encoding="latin-1")
    except OSError:
        loc_logger.warning(f"read_conf: no {os.fspath(path)} file found")
        return False

    loc_logger.debug(f"read_conf: using {os.fspath(path)}")
    for param in params:
        param.is_set = False

    with stream:
        for chunk in _chunks(stream):
            pair = _split(chunk)
            if pair is None:
                continue
            value = parse_value(trim_space(pair[0]), trim_space(pair[1]))
            for param in params:
                param.apply(value)
            for param in loc_parameters:
                param.apply(value)

    _init_logger()
    return True