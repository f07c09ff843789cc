"""Command-line layer: argument parsing, prompts and console output."""

from winsvc_installer.cli.arguments import (
    InstallerArguments,
    Operation,
    format_command_line,
    parse_arguments,
)

__all__ = ["InstallerArguments", "Operation", "format_command_line", "parse_arguments"]
