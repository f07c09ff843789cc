"""Command-line arguments and their round trip into the elevated child."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from enum import StrEnum, unique
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

from winsvc_installer import __version__
from winsvc_installer.errors import ArgumentsError

if TYPE_CHECKING:
    from collections.abc import Sequence


@unique
class Operation(StrEnum):
    INSTALL = "install"
    UNINSTALL = "uninstall"


@dataclass(slots=True)
class InstallerArguments:
    """Values resolved from the command line and, later, from prompts."""

    service_name: str = ""
    display_name: str = ""
    file_path: str = ""
    description: str = ""
    operation: Operation | None = None
    verbose: bool = False
    assume_yes: bool = False
    config_path: Path | None = None
    log_dir: Path | None = None
    relay_dir: Path | None = None


class _RaisingParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting on bad input."""

    def error(self, message: str) -> NoReturn:
        raise ArgumentsError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _RaisingParser(
        prog="winsvc-installer",
        description="Install or uninstall a Windows service via sc.exe.",
    )
    parser.add_argument(
        "-s", "--service-name", default="", help="The name the system uses for the service."
    )
    parser.add_argument(
        "-n", "--display-name", default="", help="The human readable display name."
    )
    parser.add_argument("-f", "--file-path", default="", help="Path of the service executable.")
    parser.add_argument("-d", "--description", default="", help="Text describing the service.")
    parser.add_argument(
        "-o",
        "--operation",
        type=Operation,
        choices=list(Operation),
        default=None,
        help="Operation to perform.",
    )
    parser.add_argument(
        "-y", "--yes", dest="assume_yes", action="store_true", help="Elevate without asking."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging output.")
    parser.add_argument("--config", dest="config_path", type=Path, default=None)
    parser.add_argument("--log-dir", type=Path, default=None)
    parser.add_argument("--relay-dir", type=Path, default=None, help=argparse.SUPPRESS)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_arguments(argv: Sequence[str]) -> InstallerArguments:
    """Parse *argv* (without the program name). Raises `ArgumentsError`."""
    ns = build_parser().parse_args(list(argv))
    return InstallerArguments(
        service_name=ns.service_name.strip(),
        display_name=ns.display_name.strip(),
        file_path=ns.file_path.strip().strip('"').strip(),
        description=ns.description.strip(),
        operation=ns.operation,
        verbose=ns.verbose,
        assume_yes=ns.assume_yes,
        config_path=ns.config_path,
        log_dir=ns.log_dir,
        relay_dir=ns.relay_dir,
    )


def format_command_line(args: InstallerArguments) -> list[str]:
    """Rebuild the argument list for the elevated child.

    Only resolved values are forwarded, so the child never prompts. Paths are
    made absolute because an elevated process starts in the system directory.
    """
    argv: list[str] = []
    if args.operation is not None:
        argv += ["--operation", args.operation.value]
    pairs = (
        ("--service-name", args.service_name),
        ("--display-name", args.display_name),
        ("--file-path", str(Path(args.file_path).resolve()) if args.file_path else ""),
        ("--description", args.description),
    )
    for flag, value in pairs:
        if value:
            argv += [flag, value]
    if args.config_path is not None:
        argv += ["--config", str(args.config_path.resolve())]
    if args.log_dir is not None:
        argv += ["--log-dir", str(args.log_dir.resolve())]
    if args.verbose:
        argv.append("--verbose")
    return argv
