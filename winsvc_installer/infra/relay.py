"""Relay of the elevated child's output back to the parent.

An elevated (``runas``) child cannot inherit the parent's pipes, so the two
processes share a relay directory instead: the child re-points its standard
streams at files in that directory and the parent tails them line by line.
"""

from __future__ import annotations

import logging
import sys
import threading
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

STDOUT_FILE = "stdout.log"
STDERR_FILE = "stderr.log"

_POLL_INTERVAL = 0.1


def redirect_streams(relay_dir: Path) -> tuple[TextIO, TextIO]:
    """Point ``sys.stdout``/``sys.stderr`` at the relay files (child side).

    Both files are line-buffered so the parent sees each line as soon as it
    is written. Returns the new ``(stdout, stderr)`` pair.
    """
    relay_dir.mkdir(parents=True, exist_ok=True)
    out = (relay_dir / STDOUT_FILE).open("a", encoding="utf-8", buffering=1)
    err = (relay_dir / STDERR_FILE).open("a", encoding="utf-8", buffering=1)
    sys.stdout = out
    sys.stderr = err
    return out, err


class StreamRelay:
    """Tail one relay file on a background thread.

    Every complete line is passed to *callback* in order. After `stop()` the
    remaining content is drained and the callback receives a final ``None``
    to mark the end of the stream.
    """

    def __init__(
        self,
        path: Path,
        callback: Callable[[str | None], None],
        *,
        poll_interval: float = _POLL_INTERVAL,
    ) -> None:
        self._path = path
        self._callback = callback
        self._poll_interval = poll_interval
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            name=f"relay-{path.name}",
            daemon=True,
        )

    def start(self) -> None:
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Signal end of stream and wait for the final drain."""
        self._stop.set()
        if self._thread.is_alive():
            self._thread.join(timeout)

    def _emit(self, line: str | None) -> None:
        try:
            self._callback(line)
        except Exception:
            logger.exception("Relay callback failed for %s", self._path.name)

    def _run(self) -> None:
        handle: TextIO | None = None
        pending = ""
        try:
            while True:
                stopping = self._stop.is_set()
                if handle is None and self._path.is_file():
                    handle = self._path.open(encoding="utf-8", errors="replace", newline="")
                if handle is not None:
                    chunk = handle.read()
                    if chunk:
                        pending += chunk
                        *lines, pending = pending.split("\n")
                        for line in lines:
                            self._emit(line.rstrip("\r"))
                        continue
                if stopping:
                    break
                self._stop.wait(self._poll_interval)
        except OSError:
            logger.warning("Relay of %s interrupted", self._path.name, exc_info=True)
        finally:
            if handle is not None:
                handle.close()
        if pending:
            self._emit(pending.rstrip("\r"))
        self._emit(None)
