# src/ledger/queries.py — v1
"""Search helpers over a LedgerStore for audit and impact questions.

These complement the store's typed queries with looser matching: free-text
search, history by artifact id regardless of type, story lookup.
Results are lists in append order unless stated otherwise.
"""

from __future__ import annotations

from datetime import datetime, timezone

from cellgov.ledger.models import LedgerEntry
from cellgov.ledger.store import LedgerStore


def find_artifact(store: LedgerStore, term: str) -> list[LedgerEntry]:
    """Case-insensitive search over created artifact ids/paths, prompt and note."""
    needle = term.lower()

    def matches(entry: LedgerEntry) -> bool:
        for artifact in entry.artifacts.created:
            if needle in artifact.id.lower():
                return True
            if artifact.path and needle in artifact.path.lower():
                return True
        if needle in entry.human_prompt.lower():
            return True
        note = entry.metadata.note if entry.metadata else None
        return bool(note and needle in note.lower())

    return store.where(matches, f"find={term}").to_list()


def get_history(store: LedgerStore, artifact_id: str) -> list[LedgerEntry]:
    """Entries that created or modified an artifact with this id (any type)."""
    return store.where(
        lambda e: any(a.id == artifact_id for a in e.artifacts.created)
        or any(m.id == artifact_id for m in e.artifacts.modified),
        f"history={artifact_id}",
    ).to_list()


def find_dependents(store: LedgerStore, api_id: str) -> list[LedgerEntry]:
    """Entries whose metadata mentions an API id (case-insensitive)."""
    needle = api_id.lower()
    return store.where(
        lambda e: e.metadata is not None
        and needle in e.metadata.model_dump_json(by_alias=True).lower(),
        f"dependents={api_id}",
    ).to_list()


def get_recent_changes(store: LedgerStore, since: datetime) -> list[LedgerEntry]:
    """Entries at or after ``since``, newest first. A naive ``since`` is UTC."""
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    recent = store.where(lambda e: e.timestamp >= since, f"since={since}").to_list()
    # Stable sort keeps append order among equal timestamps.
    return sorted(recent, key=lambda e: e.timestamp, reverse=True)


def get_entries_by_story(store: LedgerStore, story_id: str) -> list[LedgerEntry]:
    return store.where(
        lambda e: e.metadata is not None and e.metadata.story_id == story_id,
        f"story={story_id}",
    ).to_list()


def get_all_schema_changes(store: LedgerStore) -> list[LedgerEntry]:
    """Entries that carry at least one schema change."""
    return store.where(lambda e: len(e.schema_changes) > 0, "schema-changes").to_list()
