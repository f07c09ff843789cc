"""Entry point: python -m winsvc_installer.

The program relaunches itself as an elevated child once all arguments are
resolved. Everything after the elevation check runs with admin rights.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

from winsvc_installer.cli.arguments import Operation, format_command_line, parse_arguments
from winsvc_installer.cli.display import (
    build_argument_table,
    elevation_declined_panel,
    log_argument_values,
    relaunch_failed_panel,
)
from winsvc_installer.cli.prompts import resolve_missing_arguments
from winsvc_installer.config import default_config_path, load_config
from winsvc_installer.errors import ArgumentsError, ConfigError
from winsvc_installer.exit_codes import ExitCode
from winsvc_installer.infra.elevation import ElevationController, ElevationStatus
from winsvc_installer.infra.relay import redirect_streams
from winsvc_installer.infra.sc import ServiceControl
from winsvc_installer.infra.service_manager import (
    ServiceIdentity,
    ServiceLifecycleManager,
    StartMode,
)
from winsvc_installer.log_context import set_log_context
from winsvc_installer.logging_config import setup_logging, shutdown_logging

if TYPE_CHECKING:
    from collections.abc import Sequence

    from winsvc_installer.cli.arguments import InstallerArguments
    from winsvc_installer.config import InstallerConfig

logger = logging.getLogger(__name__)

_console = Console()

_IS_WINDOWS = sys.platform == "win32"


# ---------------------------------------------------------------------------
# Service operations (run with admin rights)
# ---------------------------------------------------------------------------


def run_install(
    manager: ServiceLifecycleManager,
    identity: ServiceIdentity,
    stop_on_install_failure: bool = False,
) -> bool:
    """Create, describe and start the service.

    A failed create does not stop the chain unless *stop_on_install_failure*
    is set; the description and start steps then fail on their own.
    """
    installed = manager.install(identity, StartMode.AUTO)
    if not installed and stop_on_install_failure:
        logger.warning("Install failed, skipping description and start.")
        return False
    described = manager.set_description(identity, identity.description)
    started = manager.start(identity)
    return installed and described and started


def _build_identity(args: InstallerArguments) -> ServiceIdentity:
    binary_path = str(Path(args.file_path).resolve()) if args.file_path else ""
    return ServiceIdentity(
        name=args.service_name,
        display_name=args.display_name,
        binary_path=binary_path,
        description=args.description,
    )


def perform_operation(args: InstallerArguments, config: InstallerConfig) -> ExitCode:
    manager = ServiceLifecycleManager(ServiceControl(timeout=config.command_timeout_seconds))
    identity = _build_identity(args)

    if args.operation is Operation.INSTALL:
        ok = run_install(manager, identity, config.stop_on_install_failure)
    elif args.operation is Operation.UNINSTALL:
        ok = manager.uninstall(identity)
    else:
        logger.warning("Unsupported operation.")
        return ExitCode.MISSING_OPERATION

    logger.debug("End of application.")
    return ExitCode.SUCCESS if ok else ExitCode.OPERATION_FAILED


# ---------------------------------------------------------------------------
# Elevation
# ---------------------------------------------------------------------------


def _elevate(args: InstallerArguments, config: InstallerConfig) -> int | None:
    """Relaunch elevated if needed. None means: continue in this process."""
    controller = ElevationController(
        confirm=(lambda: True) if args.assume_yes else None,
        child_timeout=config.child_timeout_seconds,
    )
    outcome = controller.ensure_elevated(format_command_line(args))

    if outcome.status == ElevationStatus.ALREADY_ELEVATED:
        return None
    if outcome.status == ElevationStatus.USER_DECLINED:
        _console.print(elevation_declined_panel())
        return ExitCode.ELEVATION_DECLINED
    if outcome.status == ElevationStatus.RELAUNCH_FAILED:
        logger.warning("Could not start child process as admin, ending application.")
        _console.print(relaunch_failed_panel())
        return ExitCode.RELAUNCH_FAILED

    logger.info("Ending parent application.")
    child_code = outcome.child_exit_code or 0
    return ExitCode.RELAUNCHED if child_code == 0 else child_code


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def _run(argv: Sequence[str]) -> int:
    if not _IS_WINDOWS:
        setup_logging()
        logger.warning("This program can only run on a windows operating system.")
        return ExitCode.NOT_WINDOWS

    try:
        args = parse_arguments(argv)
    except ArgumentsError as exc:
        setup_logging()
        logger.warning("Could not parse arguments: %s", exc)
        return ExitCode.INVALID_ARGUMENTS

    if args.relay_dir is not None:
        redirect_streams(args.relay_dir)
        set_log_context(role="elevated")

    try:
        config = load_config(args.config_path)
    except ConfigError as exc:
        relay = args.relay_dir is not None
        setup_logging(verbose=args.verbose, stream=sys.stdout if relay else None, relay=relay)
        logger.warning("%s", exc)
        return ExitCode.INVALID_ARGUMENTS

    level = getattr(logging, config.log_level.upper(), logging.INFO)
    log_dir = args.log_dir if args.log_dir is not None else config.log_dir
    if args.relay_dir is not None:
        setup_logging(level=level, verbose=args.verbose, stream=sys.stdout, relay=True)
    else:
        setup_logging(level=level, verbose=args.verbose, log_dir=log_dir)

    code = resolve_missing_arguments(args, config.name_suggestions)
    if code != ExitCode.SUCCESS:
        logger.warning("Invalid input, ending application.")
        return code

    _console.print(build_argument_table(args))
    log_argument_values(args)

    if args.operation is Operation.INSTALL and not Path(args.file_path).is_file():
        logger.warning("File with path '%s' does not exist. Aborting.", args.file_path)
        return ExitCode.FILE_NOT_FOUND

    if args.config_path is None:
        args.config_path = default_config_path()
    args.log_dir = log_dir

    relaunch_code = _elevate(args, config)
    if relaunch_code is not None:
        return relaunch_code

    return perform_operation(args, config)


def run(argv: Sequence[str]) -> int:
    """Run once and return the process exit code."""
    try:
        return int(_run(argv))
    except Exception:
        logger.critical("Unhandled exception.", exc_info=True)
        return ExitCode.UNHANDLED
    finally:
        shutdown_logging()


def main() -> None:
    """CLI entry point."""
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
