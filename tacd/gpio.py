"""Simulated GPIO lines: values live in memory instead of on hardware."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum

__all__ = [
    "LineRequestFlags",
    "LineHandle",
    "LineEvent",
    "LineEventHandle",
    "Line",
    "LineRegistry",
    "find_line",
]

log = logging.getLogger(__name__)


class _Cell:
    """A shared, thread-safe line value."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def load(self) -> int:
        with self._lock:
            return self._value

    def store(self, value: int) -> None:
        with self._lock:
            self._value = value


class LineRequestFlags(Enum):
    """Flags for requesting a line. ``OPEN_DRAIN`` combines with anything."""

    OUTPUT = "output"
    OPEN_DRAIN = "open_drain"

    def __or__(self, other: LineRequestFlags) -> LineRequestFlags:
        if self is LineRequestFlags.OPEN_DRAIN:
            return other
        if other is LineRequestFlags.OPEN_DRAIN:
            return self
        raise ValueError(f"Unsupported flag combination: {self.name} | {other.name}")


class LineHandle:
    """A requested line whose value can be set."""

    def __init__(self, name: str, cell: _Cell) -> None:
        self.name = name
        self._cell = cell

    def set_value(self, value: int) -> None:
        log.info("GPIO simulation set %s to %s", self.name, value)
        self._cell.store(value)


@dataclass(frozen=True)
class LineEvent:
    """A change of a line's value."""

    value: int


class LineEventHandle:
    """Iterator yielding an event each time the line's value changes."""

    def __init__(self, line: Line, prev_value: int | None = None, poll_interval: float = 0.1) -> None:
        self._cell = line._cell
        self.prev_value = line.stub_get() if prev_value is None else prev_value
        self.poll_interval = poll_interval

    def __iter__(self) -> LineEventHandle:
        return self

    def __next__(self) -> LineEvent:
        while True:
            value = self._cell.load()
            if value != self.prev_value:
                self.prev_value = value
                return LineEvent(value)
            time.sleep(self.poll_interval)


class Line:
    """A named line that can be requested."""

    def __init__(self, name: str, cell: _Cell) -> None:
        self.name = name
        self._cell = cell

    def request(self, flags: LineRequestFlags, initial: int, consumer: str) -> LineHandle:
        """Request the line and drive it to ``initial``."""
        self._cell.store(initial)
        return LineHandle(self.name, self._cell)

    def chip_label(self) -> str:
        return "test"

    def stub_get(self) -> int:
        """Read back the line's current value."""
        return self._cell.load()


class LineRegistry:
    """Lines by name; the same name always refers to the same value."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._lines: dict[str, _Cell] = {}

    def find_line(self, name: str) -> Line:
        with self._lock:
            cell = self._lines.setdefault(name, _Cell())
        return Line(name, cell)


_REGISTRY = LineRegistry()


def find_line(name: str) -> Line:
    """Find a line in the process-wide registry."""
    return _REGISTRY.find_line(name)