"""Terminal status line for the degit and code pipelines."""

from __future__ import annotations

import contextlib
import itertools
import sys
import threading
from collections.abc import Callable, Iterator
from typing import TextIO

_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
_CLEAR = "\r\033[K"


class Status:
    """Animated single-line status; finished stages scroll up with a tick.

    ``update(msg)`` starts a new stage. The previous stage, if any, is
    printed as ``✔ <msg>`` on its own line so the transcript survives
    after the spinner line is cleared.
    """

    interval = 0.08

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = sys.stderr if stream is None else stream
        self.stages: list[str] = []
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def current(self) -> str:
        return self.stages[-1] if self.stages else ""

    def update(self, msg: str) -> None:
        with self._lock:
            if self.stages:
                self.stream.write(f"{_CLEAR}✔ {self.stages[-1]}\n")
            self.stages.append(msg)

    def start(self) -> None:
        self._thread = threading.Thread(target=self._animate, daemon=True)
        self._thread.start()

    def stop(self, *, ok: bool = True) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
        with self._lock:
            self.stream.write(_CLEAR)
            if ok and self.stages:
                self.stream.write(f"✔ {self.stages[-1]}\n")
            self.stream.flush()

    def _animate(self) -> None:
        for frame in itertools.cycle(_FRAMES):
            if self._stop.wait(self.interval):
                return
            with self._lock:
                if self.stages:
                    self.stream.write(f"\r{frame} {self.stages[-1]}\033[K")
                    self.stream.flush()


@contextlib.contextmanager
def spinner(
    enabled: bool | None = None, stream: TextIO | None = None,
) -> Iterator[Callable[[str], None]]:
    """Yield ``Status.update``; a no-op when *stream* is not a terminal."""
    if stream is None:
        stream = sys.stderr
    if enabled is None:
        enabled = stream.isatty()
    if not enabled:
        yield lambda _msg: None
        return

    status = Status(stream)
    status.start()
    ok = False
    try:
        yield status.update
        ok = True
    finally:
        status.stop(ok=ok)
