"""Process exit codes returned by ``python -m winsvc_installer``."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class ExitCode(IntEnum):
    """Distinct exit code per terminal outcome of a run."""

    SUCCESS = 0
    UNHANDLED = 1
    RELAUNCHED = 200
    NOT_WINDOWS = 301
    INVALID_ARGUMENTS = 302
    MISSING_FILE_PATH = 303
    MISSING_DISPLAY_NAME = 304
    MISSING_SERVICE_NAME = 305
    MISSING_DESCRIPTION = 306
    MISSING_UNINSTALL_SERVICE_NAME = 307
    FILE_NOT_FOUND = 310
    ELEVATION_DECLINED = 320
    RELAUNCH_FAILED = 321
    MISSING_OPERATION = 400
    OPERATION_FAILED = 500
