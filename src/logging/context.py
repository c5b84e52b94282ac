# src/logging/context.py — v1
"""Contextual logging support — attach cell_path, iteration_id, step to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per validation pass or ledger write.
_cell_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "cell_path", default=None
)
_iteration_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "iteration_id", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    cell_path: str | None = None
    iteration_id: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        cell_path=_cell_path.get(),
        iteration_id=_iteration_id.get(),
        step=_step.get(),
    )


def set_cell_context(cell_path: str) -> contextvars.Token:
    """Set the Cell being validated. Returns a token for reset_cell_context()."""
    return _cell_path.set(cell_path)


def reset_cell_context(token: contextvars.Token) -> None:
    """Restore the Cell context that was active before set_cell_context()."""
    _cell_path.reset(token)


def set_ledger_context(iteration_id: int | str) -> contextvars.Token:
    """Set the ledger iteration being written. Returns a token for reset_ledger_context()."""
    return _iteration_id.set(str(iteration_id))


def reset_ledger_context(token: contextvars.Token) -> None:
    _iteration_id.reset(token)


def set_step_context(step: str | None) -> None:
    """Set the current validation step (manifest, pipeline, structure)."""
    _step.set(step)


def clear_context() -> None:
    """Reset all context variables."""
    _cell_path.set(None)
    _iteration_id.set(None)
    _step.set(None)
