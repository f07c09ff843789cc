"""Service runtime state as reported by ``sc query``.

The query output is scraped with a narrow grammar: the line whose first
whitespace-delimited token is ``STATE`` carries the state, and the last token
of that line is the state name::

    SERVICE_NAME: MySvc
            TYPE               : 10  WIN32_OWN_PROCESS
            STATE              : 4  RUNNING
                                    (STOPPABLE, NOT_PAUSABLE, ACCEPTS_SHUTDOWN)
"""

from __future__ import annotations

from enum import StrEnum, unique

STATE_LABEL = "STATE"


@unique
class ServiceRuntimeState(StrEnum):
    """Lifecycle state relevant to uninstalling a service."""

    RUNNING = "running"
    STOPPED = "stopped"
    OTHER = "other"


def extract_state_name(output: str) -> str | None:
    """Return the raw state token from ``sc query`` output, or None."""
    for line in output.splitlines():
        tokens = line.split()
        if not tokens or tokens[0].upper() != STATE_LABEL:
            continue
        value = tokens[-1]
        if value.upper() == STATE_LABEL or value == ":":
            return None
        return value
    return None


def parse_service_state(output: str) -> ServiceRuntimeState | None:
    """Map ``sc query`` output to a runtime state.

    Returns None when no state line is present (state unknown). Pending and
    paused states map to `ServiceRuntimeState.OTHER`.
    """
    name = extract_state_name(output)
    if name is None:
        return None
    upper = name.upper()
    if upper == "RUNNING":
        return ServiceRuntimeState.RUNNING
    if upper == "STOPPED":
        return ServiceRuntimeState.STOPPED
    return ServiceRuntimeState.OTHER
