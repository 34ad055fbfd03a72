"""Levelled console logging with coloured headers and hex dumps."""

from __future__ import annotations

import inspect
import re
import sys
import time
from enum import Enum, IntEnum


class LogLevel(IntEnum):
    """Severity levels; a message is shown when the current level is at least its own."""

    NONE = 0
    CRITICAL = 1
    ERROR = 2
    WARNING = 3
    INFO = 4
    DEBUG = 5
    VERBOSE = 6

    @property
    def letter(self) -> str:
        """Single letter used to tag output of this level."""
        return self.name[0]


class Color(Enum):
    """ANSI escape sequences used to emphasise output."""

    RED = "\x1b[1;31m"
    GREEN = "\x1b[32m"
    YELLOW = "\x1b[1;33m"
    BLUE = "\x1b[34m"
    MAGENTA = "\x1b[35m"
    CYAN = "\x1b[36m"
    NORM = "\x1b[0m"


_level = LogLevel.ERROR
_start = time.monotonic()

_LINE_WIDTH = 79
_ASCII_OFFSET = 61
_HEX_DIGITS = "0123456789ABCDEF"


def set_log_level(level: int) -> None:
    """Set the level up to which messages are shown."""
    global _level
    _level = LogLevel(level)


def log_level() -> LogLevel:
    """Return the current log level."""
    return _level


def file_name(path: str) -> str:
    """Return the part of ``path`` after the last slash or backslash."""
    return re.split(r"[\\/]", path)[-1]


def _millis() -> int:
    return int((time.monotonic() - _start) * 1000)


def _dump_line(offset: int, chunk: bytes) -> str:
    line = [" "] * _LINE_WIDTH
    line[60] = "|"
    line[77] = "|"
    line[78] = "\n"
    head = f"  | {offset & 0xFFFF:04X}: "
    line[: len(head)] = head
    pos = len(head)
    for step, byte in enumerate(chunk):
        if step == 8:
            pos += 1
        line[pos] = _HEX_DIGITS[byte >> 4]
        line[pos + 1] = _HEX_DIGITS[byte & 0x0F]
        pos += 3
        line[_ASCII_OFFSET + step] = chr(byte) if 32 <= byte <= 127 else "."
    return "".join(line)


def hex_dump(letter: str, label: str, data: bytes) -> str:
    """Render ``data`` as a tagged hex dump, 16 bytes to a line with ASCII columns."""
    data = bytes(data)
    parts = [f"[{letter}] {label}: @{id(data):X}/{len(data) & 0xFFFFFFFF}:\n"]
    for offset in range(0, len(data), 16):
        parts.append(_dump_line(offset, data[offset : offset + 16]))
    return "".join(parts)


def _wrap(level: LogLevel, text: str) -> str:
    if level == LogLevel.CRITICAL:
        return f"{Color.RED.value}{text}{Color.NORM.value}"
    if level == LogLevel.ERROR:
        return f"{Color.YELLOW.value}{text}{Color.NORM.value}"
    return text


def _enabled(level: LogLevel) -> bool:
    return _level >= level


def log_line(level: int, message: str) -> None:
    """Write ``message`` with a header naming time, caller file, line and function."""
    level = LogLevel(level)
    if not _enabled(level):
        return
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    try:
        if caller is not None:
            fname = file_name(caller.f_code.co_filename)
            lineno = caller.f_lineno
            func = caller.f_code.co_name
        else:
            fname, lineno, func = "?", 0, "?"
    finally:
        del frame, caller
    header = f"[{level.letter}] {_millis()}| {fname:<20} [{lineno:4d}] {func}: "
    sys.stdout.write(_wrap(level, header + message))


def log_raw(level: int, message: str) -> None:
    """Write ``message`` without a header."""
    level = LogLevel(level)
    if _enabled(level):
        sys.stdout.write(_wrap(level, message))


def log_hex_dump(level: int, label: str, data: bytes) -> None:
    """Write a hex dump of ``data`` if ``level`` is enabled."""
    level = LogLevel(level)
    if _enabled(level):
        sys.stdout.write(hex_dump(level.letter, label, data))