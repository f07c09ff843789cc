"""Privilege elevation by relaunching this program as an elevated child.

The parent never performs the service operation after a relaunch: it relays
the child's output into its own log, waits for it, and hands the child's exit
code back to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum, unique
from typing import TYPE_CHECKING

from winsvc_installer.infra.launcher import ProcessLauncher, WindowsLauncher, resolve_self_command

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

_module_logger = logging.getLogger(__name__)

OUTPUT_STREAM_MARKER = "[OUTPUT_STREAM]"
ERROR_STREAM_MARKER = "[ERROR_STREAM]"


@unique
class ElevationStatus(StrEnum):
    ALREADY_ELEVATED = "already_elevated"
    USER_DECLINED = "user_declined"
    RELAUNCH_FAILED = "relaunch_failed"
    RELAUNCHED = "relaunched"


@dataclass(frozen=True, slots=True)
class ElevationOutcome:
    """Terminal state of `ElevationController.ensure_elevated`."""

    status: ElevationStatus
    child_exit_code: int | None = None

    @classmethod
    def already_elevated(cls) -> ElevationOutcome:
        return cls(ElevationStatus.ALREADY_ELEVATED)

    @classmethod
    def user_declined(cls) -> ElevationOutcome:
        return cls(ElevationStatus.USER_DECLINED)

    @classmethod
    def relaunch_failed(cls) -> ElevationOutcome:
        return cls(ElevationStatus.RELAUNCH_FAILED)

    @classmethod
    def relaunched(cls, child_exit_code: int) -> ElevationOutcome:
        return cls(ElevationStatus.RELAUNCHED, child_exit_code)

    @property
    def is_elevated(self) -> bool:
        """True when this process may run the service operation itself."""
        return self.status == ElevationStatus.ALREADY_ELEVATED


def _confirm_with_prompt() -> bool:
    from winsvc_installer.cli.prompts import confirm_elevation

    return confirm_elevation()


class ElevationController:
    """Ensure the service operation runs with administrative privilege.

    Args:
        launcher: Privilege check and elevated spawn.
        confirm: Asks the operator whether to elevate. Only an explicit
            True counts as consent.
        resolve_command: Returns the command line that restarts this program.
        child_timeout: Seconds to wait for the child; None waits forever.
        logger: Sink for status lines and relayed child output.
    """

    def __init__(
        self,
        launcher: ProcessLauncher | None = None,
        confirm: Callable[[], bool] | None = None,
        resolve_command: Callable[[], list[str] | None] = resolve_self_command,
        child_timeout: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._launcher = launcher if launcher is not None else WindowsLauncher()
        self._confirm = confirm if confirm is not None else _confirm_with_prompt
        self._resolve_command = resolve_command
        self._child_timeout = child_timeout
        self._log = logger if logger is not None else _module_logger

    def _relay_output(self, line: str | None) -> None:
        self._log.info(line or OUTPUT_STREAM_MARKER)

    def _relay_error(self, line: str | None) -> None:
        self._log.warning(line or ERROR_STREAM_MARKER)

    def ensure_elevated(self, relaunch_args: Sequence[str]) -> ElevationOutcome:
        """Return how this run obtained (or failed to obtain) privilege.

        Never raises: every failure to spawn or wait on the child becomes
        ``RELAUNCH_FAILED``.
        """
        if self._launcher.is_privileged():
            self._log.debug("Program started with admin permissions.")
            return ElevationOutcome.already_elevated()

        self._log.info("The program was not started with the required permissions.")
        if self._confirm() is not True:
            self._log.warning("Elevation declined by the operator.")
            return ElevationOutcome.user_declined()

        command = self._resolve_command()
        if not command:
            self._log.warning("Could not find the file for this program.")
            return ElevationOutcome.relaunch_failed()

        try:
            child = self._launcher.spawn_elevated(command[0], [*command[1:], *relaunch_args])
        except Exception:
            self._log.exception("Could not start the elevated child process.")
            return ElevationOutcome.relaunch_failed()

        try:
            child.stream_output(self._relay_output, self._relay_error)
            self._log.debug("Waiting for child process to finish...")
            exit_code = child.wait(self._child_timeout)
        except Exception:
            self._log.exception("Process handling failed.")
            return ElevationOutcome.relaunch_failed()
        finally:
            child.close()

        if exit_code == 0:
            self._log.info("Child process exited successfully.")
        else:
            self._log.warning("Child process exited with an error: %d", exit_code)
        return ElevationOutcome.relaunched(exit_code)
