"""Hierarchical wall-clock timers used to profile solver phases."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TextIO


@dataclass
class _InnerTimer:
    start: float | None = None
    elapsed: float = 0.0
    subtimers: dict[str, _InnerTimer] = field(default_factory=dict)

    def reset(self) -> None:
        self.start = None
        self.elapsed = 0.0
        self.subtimers.clear()

    def begin(self, now: float) -> None:
        self.start = now

    def stop(self, now: float) -> None:
        if self.start is None:
            raise RuntimeError("timer stopped without having been started")
        self.elapsed += now - self.start
        self.start = None

    def suspend(self, now: float) -> None:
        # only timers that appear active accumulate and propagate
        if self.start is not None:
            self.elapsed += now - self.start
            _suspend_all(self.subtimers, now)

    def resume(self, now: float) -> None:
        if self.start is not None:
            self.start = now
            _resume_all(self.subtimers, now)


def _suspend_all(timers: dict[str, _InnerTimer], now: float) -> None:
    for timer in timers.values():
        timer.suspend(now)


def _resume_all(timers: dict[str, _InnerTimer], now: float) -> None:
    for timer in timers.values():
        timer.resume(now)


def _format_duration(seconds: float) -> str:
    for scale, unit in ((1.0, "s"), (1e-3, "ms"), (1e-6, "µs")):
        if seconds >= scale:
            return f"{seconds / scale:.9g}{unit}"
    return f"{seconds * 1e9:.9g}ns"


def _print_tree(
    timers: dict[str, _InnerTimer], depth: int, file: TextIO | None
) -> None:
    indent = " " * (4 * depth)
    for key, timer in timers.items():
        print(f"{indent}{key} : {_format_duration(timer.elapsed)}", file=file)
        _print_tree(timer.subtimers, depth + 1, file)


class Timers:
    """A tree of named timers; nested timers become children of the active one."""

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._stack: list[str] = []
        self._subtimers: dict[str, _InnerTimer] = {}

    def _active_timer(self) -> _InnerTimer | None:
        if not self._stack:
            return None
        first, *rest = self._stack
        active = self._subtimers[first]
        for key in rest:
            active = active.subtimers[key]
        return active

    def reset_timer(self, key: str) -> None:
        """Reset (creating if needed) the root-level timer ``key``."""
        self._subtimers.setdefault(key, _InnerTimer()).reset()

    def start_as_current(self, key: str) -> None:
        """Start timer ``key`` as a child of the currently running timer."""
        active = self._active_timer()
        children = active.subtimers if active is not None else self._subtimers
        children.setdefault(key, _InnerTimer()).begin(self._clock())
        self._stack.append(key)

    def stop_current(self) -> None:
        """Stop the innermost running timer."""
        active = self._active_timer()
        if active is None:
            raise RuntimeError("no timer is currently running")
        active.stop(self._clock())
        self._stack.pop()

    def suspend(self) -> None:
        """Pause every running timer in the collection."""
        _suspend_all(self._subtimers, self._clock())

    def resume(self) -> None:
        """Restart every timer paused by :meth:`suspend`."""
        _resume_all(self._subtimers, self._clock())

    def total_time(self) -> float:
        """Total seconds accumulated by the root-level timers."""
        return sum(timer.elapsed for timer in self._subtimers.values())

    def print(self, file: TextIO | None = None) -> None:
        """Write the timer tree, one indented line per timer."""
        _print_tree(self._subtimers, 0, file)

    @contextmanager
    def timeit(self, key: str) -> Iterator[None]:
        """Time the enclosed block under ``key``."""
        self.start_as_current(key)
        try:
            yield
        finally:
            self.stop_current()

    @contextmanager
    def notimeit(self) -> Iterator[None]:
        """Exclude the enclosed block from all running timers."""
        self.suspend()
        try:
            yield
        finally:
            self.resume()