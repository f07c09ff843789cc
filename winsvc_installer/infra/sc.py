"""Thin runner around ``sc.exe``, the Windows service-control utility."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass

from winsvc_installer.errors import CommandTimeoutError

logger = logging.getLogger(__name__)

SC_EXECUTABLE = "sc.exe"
_CREATE_NO_WINDOW: int = getattr(subprocess, "CREATE_NO_WINDOW", 0)

SYSTEM_ERROR_CODES_URL = (
    "https://learn.microsoft.com/en-us/windows/win32/debug/system-error-codes"
)

_EXIT_CODE_HINTS: dict[int, str] = {
    5: "access is denied, run as a privileged user",
    1056: "an instance of the service is already running",
    1060: "the specified service does not exist",
    1062: "the service has not been started",
    1072: "the service has been marked for deletion",
    1073: "the specified service already exists",
}


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Normalized outcome of one service-control invocation."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


def describe_exit_code(code: int) -> str:
    """Human-readable meaning of a known ``sc.exe`` exit code."""
    hint = _EXIT_CODE_HINTS.get(code)
    if hint is not None:
        return hint
    return f"see {SYSTEM_ERROR_CODES_URL}"


class ServiceControl:
    """Runs ``sc.exe`` subcommands and captures their output.

    Every call blocks until the utility exits. With ``timeout`` set, a call
    that outlives it raises `CommandTimeoutError`.
    """

    def __init__(self, executable: str = SC_EXECUTABLE, timeout: float | None = None) -> None:
        self._executable = executable
        self._timeout = timeout

    def run(self, *args: str) -> CommandResult:
        cmd = [self._executable, *args]
        logger.debug("Running %s", subprocess.list2cmdline(cmd))
        try:
            completed = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                check=False,
                timeout=self._timeout,
                creationflags=_CREATE_NO_WINDOW,
            )
        except subprocess.TimeoutExpired as exc:
            msg = f"'{' '.join(cmd)}' did not finish within {self._timeout}s"
            raise CommandTimeoutError(msg) from exc
        return CommandResult(
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
