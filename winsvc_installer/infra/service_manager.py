"""Windows service lifecycle driven through ``sc.exe``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum, unique

from winsvc_installer.infra.sc import CommandResult, ServiceControl, describe_exit_code
from winsvc_installer.infra.service_state import ServiceRuntimeState, parse_service_state

_module_logger = logging.getLogger(__name__)


@unique
class StartMode(StrEnum):
    """Service start type, in ``sc.exe`` vocabulary."""

    BOOT = "boot"
    SYSTEM = "system"
    AUTO = "auto"
    DEMAND = "demand"
    DISABLED = "disabled"


@dataclass(frozen=True, slots=True)
class ServiceIdentity:
    """Fully resolved identity of the service to install or remove."""

    name: str
    display_name: str = ""
    binary_path: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        if not self.name.strip():
            msg = "Service name must not be empty"
            raise ValueError(msg)

    @property
    def label(self) -> str:
        """Display name, falling back to the service name."""
        return self.display_name or self.name


class ServiceLifecycleManager:
    """Install, describe, start and uninstall a service.

    Each operation returns True on success. Non-zero exit codes and
    unexpected faults are logged and reported as False, never raised.
    """

    def __init__(
        self,
        sc: ServiceControl | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._sc = sc if sc is not None else ServiceControl()
        self._log = logger if logger is not None else _module_logger

    def _warn_failed(self, what: str, identity: ServiceIdentity, result: CommandResult) -> None:
        self._log.warning(
            "Could not %s service '%s' (%s). SC exit code: %d (%s)",
            what,
            identity.label,
            identity.name,
            result.exit_code,
            describe_exit_code(result.exit_code),
        )
        output = (result.stderr or result.stdout).strip()
        if output:
            self._log.debug("sc output: %s", output)

    def install(self, identity: ServiceIdentity, start_mode: StartMode = StartMode.AUTO) -> bool:
        """Create the service. Display name defaults to the service name."""
        try:
            self._log.debug("Installing service...")
            result = self._sc.run(
                "create",
                identity.name,
                "DisplayName=",
                identity.label,
                "binPath=",
                identity.binary_path,
                "start=",
                start_mode.value,
            )
            if not result.succeeded:
                self._warn_failed("INSTALL", identity, result)
                return False
            self._log.info("Successfully installed service: '%s'.", identity.label)
            return True
        except Exception:
            self._log.exception("Error installing service.")
            return False

    def set_description(self, identity: ServiceIdentity, text: str) -> bool:
        """Attach *text* as the service description."""
        try:
            result = self._sc.run("description", identity.name, text)
            if not result.succeeded:
                self._warn_failed("add DESCRIPTION to", identity, result)
                return False
            self._log.info("Description added to service '%s'.", identity.name)
            return True
        except Exception:
            self._log.exception("Error setting description.")
            return False

    def start(self, identity: ServiceIdentity) -> bool:
        try:
            result = self._sc.run("start", identity.name)
            if not result.succeeded:
                self._warn_failed("START", identity, result)
                return False
            self._log.info("Service '%s' started.", identity.label)
            return True
        except Exception:
            self._log.exception("Error starting service.")
            return False

    def query_state(self, identity: ServiceIdentity) -> ServiceRuntimeState | None:
        """Query the service and parse its state. None if unavailable."""
        result = self._sc.run("query", identity.name)
        if not result.succeeded:
            self._warn_failed("QUERY", identity, result)
            return None
        state = parse_service_state(result.stdout)
        if state is None:
            self._log.error("Could not parse the QUERY for service '%s'.", identity.label)
        return state

    def uninstall(self, identity: ServiceIdentity) -> bool:
        """Stop the service if running, then delete it.

        Deletion only happens once the service is known to be stopped.
        Pending or paused states abort without touching the service.
        """
        try:
            self._log.info("Uninstalling service '%s'...", identity.label)

            state = self.query_state(identity)
            if state is None:
                self._log.warning("Aborting uninstall of '%s'.", identity.label)
                return False

            if state is ServiceRuntimeState.RUNNING:
                stop = self._sc.run("stop", identity.name)
                if not stop.succeeded:
                    self._warn_failed("STOP", identity, stop)
                    self._log.warning("Aborting uninstall of '%s'.", identity.label)
                    return False
                self._log.info("Service '%s' stopped.", identity.label)
            elif state is not ServiceRuntimeState.STOPPED:
                self._log.warning(
                    "Service '%s' STATE is neither RUNNING nor STOPPED. Cannot stop/uninstall it.",
                    identity.label,
                )
                return False

            delete = self._sc.run("delete", identity.name)
            if not delete.succeeded:
                self._warn_failed("DELETE", identity, delete)
                return False

            self._log.info("Service '%s' uninstalled.", identity.label)
            return True
        except Exception:
            self._log.exception("Error uninstalling service.")
            return False
