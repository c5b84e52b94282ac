# src/ledger/jsonl_backend.py — v1
"""JSON Lines ledger backend — one camelCase entry per line in ledger.jsonl."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from cellgov.ledger.base_backend import BaseLedgerBackend
from cellgov.ledger.errors import LedgerCorruptError
from cellgov.ledger.models import LedgerEntry

logger = logging.getLogger(__name__)


class JsonlLedgerBackend(BaseLedgerBackend):
    """Append-only JSONL file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[LedgerEntry]:
        """Read all entries. A missing file is an empty ledger.

        Raises:
            LedgerCorruptError: If a non-blank line is not a valid entry.
        """
        if not self._path.exists():
            return []
        entries: list[LedgerEntry] = []
        with self._path.open(encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    entries.append(LedgerEntry.model_validate_json(line))
                except ValidationError as e:
                    raise LedgerCorruptError(f"{self._path}:{lineno}: {e}") from e
        logger.debug("Loaded %d ledger entries from %s", len(entries), self._path)
        return entries

    def append(self, entry: LedgerEntry) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as f:
            f.write(entry.to_json() + "\n")
            f.flush()
