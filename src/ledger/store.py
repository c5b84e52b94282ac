# src/ledger/store.py — v1
"""Append-only ledger store with lazy, restartable queries.

Invariants:
- Entries are never mutated, removed or reordered.
- Iteration ids are strictly increasing in append order.

Concurrency: ``append`` runs check-and-append (backend write included)
under one lock. Readers snapshot the visible length and walk indices below
it, so they observe the store before or after an append, never during.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Iterator

from cellgov.ledger.base_backend import BaseLedgerBackend
from cellgov.ledger.errors import LedgerCorruptError, LedgerOrderError
from cellgov.ledger.memory_backend import InMemoryLedgerBackend
from cellgov.ledger.models import LedgerEntry
from cellgov.logging.context import reset_ledger_context, set_ledger_context

logger = logging.getLogger(__name__)

IterationId = int | str


def _is_after(candidate: IterationId, latest: IterationId) -> bool:
    """Strict ordering; ints and strings are never comparable."""
    if isinstance(candidate, int) != isinstance(latest, int):
        raise LedgerOrderError(
            f"iteration id {candidate!r} cannot be ordered after {latest!r}: "
            "integer and string ids cannot be mixed"
        )
    return candidate > latest  # type: ignore[operator]


class LedgerQuery:
    """Lazy, finite, restartable view of matching entries in append order.

    Each iteration starts from the first entry and stops at the store size
    observed when that iteration began.
    """

    def __init__(
        self,
        store: LedgerStore,
        predicate: Callable[[LedgerEntry], bool],
        description: str,
    ) -> None:
        self._store = store
        self._predicate = predicate
        self._description = description

    def __iter__(self) -> Iterator[LedgerEntry]:
        return (entry for entry in self._store._scan() if self._predicate(entry))

    def __repr__(self) -> str:
        return f"LedgerQuery({self._description})"

    def to_list(self) -> list[LedgerEntry]:
        return list(self)


class LedgerStore:
    """Append-only sequence of LedgerEntry objects."""

    def __init__(self, backend: BaseLedgerBackend | None = None) -> None:
        self._backend = backend or InMemoryLedgerBackend()
        self._lock = threading.Lock()
        self._entries: list[LedgerEntry] = []

        for entry in self._backend.load():
            if self._entries:
                latest = self._entries[-1].iteration_id
                try:
                    in_order = _is_after(entry.iteration_id, latest)
                except LedgerOrderError as e:
                    raise LedgerCorruptError(str(e)) from e
                if not in_order:
                    raise LedgerCorruptError(
                        f"stored iteration id {entry.iteration_id!r} does not "
                        f"follow {latest!r}"
                    )
            self._entries.append(entry)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[LedgerEntry, ...]:
        """Snapshot of all entries in append order."""
        return tuple(self._scan())

    @property
    def latest_iteration_id(self) -> IterationId | None:
        snapshot = len(self._entries)
        return self._entries[snapshot - 1].iteration_id if snapshot else None

    def append(self, entry: LedgerEntry) -> int:
        """Append an entry after checking monotonicity.

        Returns:
            0-based position of the stored entry.

        Raises:
            LedgerOrderError: If entry.iteration_id is not strictly greater
                than the latest stored id. The store is left unchanged.
        """
        if not isinstance(entry, LedgerEntry):
            raise TypeError(f"expected LedgerEntry, got {type(entry).__name__}")

        token = set_ledger_context(entry.iteration_id)
        try:
            with self._lock:
                if self._entries:
                    latest = self._entries[-1].iteration_id
                    if not _is_after(entry.iteration_id, latest):
                        logger.warning(
                            "Rejected append of iteration %r (latest is %r)",
                            entry.iteration_id,
                            latest,
                        )
                        raise LedgerOrderError(
                            f"iteration id {entry.iteration_id!r} must be greater "
                            f"than latest {latest!r}"
                        )
                self._backend.append(entry)
                self._entries.append(entry)
                position = len(self._entries) - 1
            logger.info("Appended iteration %r at position %d", entry.iteration_id, position)
            return position
        finally:
            reset_ledger_context(token)

    def query_by_artifact(self, artifact_type: str, artifact_id: str) -> LedgerQuery:
        """Entries whose created or modified artifacts match (type, id)."""
        return LedgerQuery(
            self,
            lambda e: e.touches_artifact(artifact_type, artifact_id),
            f"artifact={artifact_type}:{artifact_id}",
        )

    def query_by_schema_table(self, table: str) -> LedgerQuery:
        """Entries with a schema change on ``table``."""
        return LedgerQuery(self, lambda e: e.touches_table(table), f"table={table}")

    def query_by_time_range(self, start: datetime, end: datetime) -> LedgerQuery:
        """Entries with start <= timestamp <= end. Naive bounds are UTC.

        Raises:
            ValueError: If start is after end.
        """
        start, end = _as_utc(start), _as_utc(end)
        if start > end:
            raise ValueError(f"time range start {start} is after end {end}")
        return LedgerQuery(
            self,
            lambda e: start <= e.timestamp <= end,
            f"time={start.isoformat()}..{end.isoformat()}",
        )

    def where(
        self, predicate: Callable[[LedgerEntry], bool], description: str = "custom"
    ) -> LedgerQuery:
        """Arbitrary filter with the same lazy, restartable contract."""
        return LedgerQuery(self, predicate, description)

    def _scan(self) -> Iterator[LedgerEntry]:
        visible = len(self._entries)
        for i in range(visible):
            yield self._entries[i]


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
