"""Interactive prompts for values missing from the command line."""

from __future__ import annotations

import logging
from pathlib import PureWindowsPath
from typing import TYPE_CHECKING

import questionary

from winsvc_installer.cli.arguments import Operation
from winsvc_installer.exit_codes import ExitCode

if TYPE_CHECKING:
    from winsvc_installer.cli.arguments import InstallerArguments

logger = logging.getLogger(__name__)


def _clean(answer: str | None) -> str:
    """Strip whitespace and the quotes Explorer adds to dropped paths."""
    return (answer or "").strip().strip('"').strip()


def prompt_for_value(value: str, name: str, recommendation: str | None = None) -> str | None:
    """Return *value* if set, otherwise ask for it.

    A *recommendation* is pre-filled and can be edited in place. Returns None
    when the answer is blank or the prompt was cancelled.
    """
    if value.strip():
        return value

    answer = questionary.text(
        f"Enter a value for '{name}':",
        default=recommendation or "",
    ).ask()
    cleaned = _clean(answer)
    if cleaned:
        return cleaned

    logger.warning("Invalid value for '%s'.", name)
    return None


def prompt_for_operation() -> Operation | None:
    answer: Operation | None = questionary.select(
        "Do you want to install or uninstall a service?",
        choices=[
            questionary.Choice("Install", value=Operation.INSTALL),
            questionary.Choice("Uninstall", value=Operation.UNINSTALL),
        ],
    ).ask()
    return answer


def select_name(file_stem: str, suggestions: list[str]) -> str:
    """Let the operator pick a name from the config suggestions.

    The executable's stem is always the first option and the fallback.
    """
    if not suggestions:
        return file_stem
    choices = list(dict.fromkeys([file_stem, *suggestions]))
    answer: str | None = questionary.select(
        "Select a name from your list:",
        choices=choices,
        default=file_stem,
    ).ask()
    return answer or file_stem


def confirm_elevation() -> bool:
    """Ask whether to relaunch with administrator permissions."""
    confirmed: bool | None = questionary.confirm(
        "Administrator permissions are required. Do you want to elevate the process?",
        default=False,
    ).ask()
    return confirmed is True


def resolve_missing_arguments(
    args: InstallerArguments,
    name_suggestions: list[str] | None = None,
) -> ExitCode:
    """Fill every value the chosen operation needs, prompting where missing.

    Mutates *args* in place. Returns ``ExitCode.SUCCESS`` or the code of the
    first field that stayed empty.
    """
    if args.operation is None:
        args.operation = prompt_for_operation()
        if args.operation is None:
            return ExitCode.MISSING_OPERATION

    if args.operation is Operation.INSTALL:
        file_path = prompt_for_value(args.file_path, "FilePath")
        if file_path is None:
            return ExitCode.MISSING_FILE_PATH
        args.file_path = file_path

        recommended = args.display_name
        if not recommended:
            recommended = select_name(PureWindowsPath(file_path).stem, name_suggestions or [])

        display_name = prompt_for_value(args.display_name, "DisplayName", recommended)
        if display_name is None:
            return ExitCode.MISSING_DISPLAY_NAME
        args.display_name = display_name

        service_name = prompt_for_value(args.service_name, "ServiceName", display_name)
        if service_name is None:
            return ExitCode.MISSING_SERVICE_NAME
        args.service_name = service_name

        description = prompt_for_value(args.description, "Description")
        if description is None:
            return ExitCode.MISSING_DESCRIPTION
        args.description = description

    if args.operation is Operation.UNINSTALL:
        service_name = prompt_for_value(args.service_name, "ServiceName")
        if service_name is None:
            return ExitCode.MISSING_UNINSTALL_SERVICE_NAME
        args.service_name = service_name

    return ExitCode.SUCCESS
