"""Process launching with OS-level elevation.

`ProcessLauncher` and `ChildHandle` are the seams the elevation controller
depends on; `WindowsLauncher` implements them with ``ShellExecuteExW`` and
the ``runas`` verb.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from winsvc_installer.errors import ChildTimeoutError, ElevationError
from winsvc_installer.infra import _win32
from winsvc_installer.infra.relay import STDERR_FILE, STDOUT_FILE, StreamRelay

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)

PACKAGE_NAME = "winsvc_installer"
RELAY_OPTION = "--relay-dir"


@runtime_checkable
class ChildHandle(Protocol):
    """A spawned elevated child process."""

    def stream_output(
        self,
        on_output: Callable[[str | None], None],
        on_error: Callable[[str | None], None],
    ) -> None: ...
    def wait(self, timeout: float | None = None) -> int: ...
    def close(self) -> None: ...


@runtime_checkable
class ProcessLauncher(Protocol):
    """Privilege check and elevated spawn of an executable."""

    def is_privileged(self) -> bool: ...
    def spawn_elevated(self, exe_path: str, args: Sequence[str]) -> ChildHandle: ...


def resolve_self_command() -> list[str] | None:
    """Command line that starts this program again, or None if unknown.

    A frozen build is its own executable; otherwise the interpreter runs the
    package as a module.
    """
    executable = sys.executable
    if not executable:
        return None
    if getattr(sys, "frozen", False):
        return [executable]
    return [executable, "-m", PACKAGE_NAME]


class WindowsChildHandle:
    """Handle to a ``runas`` child whose streams arrive through a relay directory."""

    def __init__(self, process_handle: int, relay_dir: Path) -> None:
        self._handle = process_handle
        self._relay_dir = relay_dir
        self._relays: list[StreamRelay] = []
        self._closed = False

    def stream_output(
        self,
        on_output: Callable[[str | None], None],
        on_error: Callable[[str | None], None],
    ) -> None:
        self._relays = [
            StreamRelay(self._relay_dir / STDOUT_FILE, on_output),
            StreamRelay(self._relay_dir / STDERR_FILE, on_error),
        ]
        for relay in self._relays:
            relay.start()

    def wait(self, timeout: float | None = None) -> int:
        """Block until the child exits and return its exit code.

        Raises `ChildTimeoutError` if *timeout* elapses first; the child
        keeps running in that case.
        """
        try:
            if not _win32.wait_for_process(self._handle, timeout):
                msg = f"Elevated child did not exit within {timeout}s"
                raise ChildTimeoutError(msg)
            return _win32.get_exit_code(self._handle)
        finally:
            self.close()

    def close(self) -> None:
        """Stop the relays and release the process handle and relay directory."""
        if self._closed:
            return
        self._closed = True
        for relay in self._relays:
            relay.stop()
        _win32.close_handle(self._handle)
        shutil.rmtree(self._relay_dir, ignore_errors=True)


class WindowsLauncher:
    """Elevates through the UAC ``runas`` verb."""

    def is_privileged(self) -> bool:
        try:
            return _win32.is_user_admin()
        except (AttributeError, OSError):
            logger.debug("Admin check unavailable", exc_info=True)
            return False

    def spawn_elevated(self, exe_path: str, args: Sequence[str]) -> WindowsChildHandle:
        relay_dir = Path(tempfile.mkdtemp(prefix="winsvc-relay-"))
        params = subprocess.list2cmdline([*args, RELAY_OPTION, str(relay_dir)])
        logger.debug("Spawning elevated: %s %s", exe_path, params)
        try:
            handle = _win32.shell_execute_runas(exe_path, params, str(Path.cwd()))
        except (AttributeError, OSError) as exc:
            shutil.rmtree(relay_dir, ignore_errors=True)
            msg = f"Elevation request for {exe_path} was rejected: {exc}"
            raise ElevationError(msg) from exc
        return WindowsChildHandle(handle, relay_dir)
