"""Infrastructure: elevation relaunch, process launching, service control."""

from winsvc_installer.infra.elevation import ElevationController, ElevationOutcome, ElevationStatus
from winsvc_installer.infra.launcher import ProcessLauncher, WindowsLauncher
from winsvc_installer.infra.sc import CommandResult, ServiceControl
from winsvc_installer.infra.service_manager import (
    ServiceIdentity,
    ServiceLifecycleManager,
    StartMode,
)
from winsvc_installer.infra.service_state import ServiceRuntimeState, parse_service_state

__all__ = [
    "CommandResult",
    "ElevationController",
    "ElevationOutcome",
    "ElevationStatus",
    "ProcessLauncher",
    "ServiceControl",
    "ServiceIdentity",
    "ServiceLifecycleManager",
    "ServiceRuntimeState",
    "StartMode",
    "WindowsLauncher",
    "parse_service_state",
]
