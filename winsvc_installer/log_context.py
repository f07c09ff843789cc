"""Logging context: ContextVar-based log enrichment.

Every log record is enriched with a ``[role]`` prefix via a `ContextFilter`
attached to the root logger handlers.  The elevated child sets its role to
``elevated`` so relayed lines stay distinguishable in the parent's log.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar

ctx_role: ContextVar[str | None] = ContextVar("ctx_role", default=None)


class ContextFilter(logging.Filter):
    """Inject ContextVar values into every LogRecord as ``record.ctx``."""

    def filter(self, record: logging.LogRecord) -> bool:
        role = ctx_role.get(None)
        record.ctx = f"[{role}] " if role else ""
        return True


def set_log_context(*, role: str | None = None) -> None:
    """Set logging context for the current run."""
    if role is not None:
        ctx_role.set(role)
