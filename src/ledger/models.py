# src/ledger/models.py — v1
"""Ledger domain models: one immutable record per completed iteration.

All models are frozen and use tuples for sequences, so an entry cannot be
changed after construction. Attributes are snake_case; the wire format
(ledger.jsonl) uses camelCase aliases.
"""

from __future__ import annotations

from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Literal, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    PrivateAttr,
    field_validator,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

ArtifactType = Literal["cell", "api", "schema", "package", "feature", "library", "tool", "epic"]
SchemaOperation = Literal["create", "alter", "drop"]

ARTIFACT_TYPES: tuple[str, ...] = ArtifactType.__args__  # type: ignore[attr-defined]


class _LedgerModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class CreatedArtifact(_LedgerModel):
    """Artifact introduced by an iteration; type is a closed enumeration."""

    type: ArtifactType
    id: str
    path: str | None = None


class ModifiedArtifact(_LedgerModel):
    """Artifact changed by an iteration; any field may be omitted."""

    type: str | None = None
    id: str | None = None
    path: str | None = None
    changes: tuple[str, ...] | None = None


class SchemaChange(_LedgerModel):
    table: str
    operation: SchemaOperation
    migration: str


class Artifacts(_LedgerModel):
    created: tuple[CreatedArtifact, ...]
    modified: tuple[ModifiedArtifact, ...]


def _freeze(value: Any) -> Any:
    """Read-only copy of a JSON-like value: mappings become proxies, lists tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


class LedgerMetadata(_LedgerModel):
    """Known metadata fields plus a read-only residual map for everything else.

    Any key that is not a known field (by name or wire alias) is kept in
    ``extra``, including a key literally named ``extra``, and is written back
    at the top level on output, so it round-trips unchanged. Residual values
    are deep-frozen.
    """

    agent: str | None = None
    duration: float | None = None
    iteration_count: int | None = None
    story_id: str | None = None
    tasks: tuple[str, ...] | None = None
    note: str | None = None

    _residual: Mapping[str, Any] = PrivateAttr(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def _known_keys(cls) -> set[str]:
        known: set[str] = set()
        for name, info in cls.model_fields.items():
            known.update({name, info.alias or to_camel(name)})
        return known

    @model_validator(mode="wrap")
    @classmethod
    def _collect_residual(cls, data: Any, handler: Any) -> Any:
        if not isinstance(data, dict):
            return handler(data)
        known = cls._known_keys()
        fields = {k: v for k, v in data.items() if k in known}
        residual = {k: v for k, v in data.items() if k not in known}
        instance = handler(fields)
        instance._residual = _freeze(residual)
        return instance

    @model_serializer(mode="wrap")
    def _flatten_residual(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        return {**_thaw(self._residual), **data}

    @property
    def extra(self) -> Mapping[str, Any]:
        """Residual keys, read-only."""
        return self._residual

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a known field (by name or wire alias) or a residual key."""
        for name in type(self).model_fields:
            if key in (name, to_camel(name)):
                value = getattr(self, name)
                return default if value is None else value
        return self._residual.get(key, default)


class LedgerEntry(_LedgerModel):
    """Provenance record for one completed iteration."""

    iteration_id: int | str
    timestamp: datetime
    human_prompt: str
    artifacts: Artifacts
    schema_changes: tuple[SchemaChange, ...]
    metadata: LedgerMetadata | None = None

    @field_validator("iteration_id", mode="before")
    @classmethod
    def validate_iteration_id(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("iteration_id must be an int or a non-empty string")
        if isinstance(v, str) and not v.strip():
            raise ValueError("iteration_id must not be empty")
        return v

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: datetime) -> datetime:
        """Naive timestamps are taken as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def touches_artifact(self, artifact_type: str, artifact_id: str) -> bool:
        """True if a created or modified artifact matches (type, id)."""
        if any(a.type == artifact_type and a.id == artifact_id for a in self.artifacts.created):
            return True
        return any(
            m.type == artifact_type and m.id == artifact_id for m in self.artifacts.modified
        )

    def touches_table(self, table: str) -> bool:
        return any(change.table == table for change in self.schema_changes)

    def to_json(self) -> str:
        """Serialize to one ledger.jsonl line (camelCase, no nulls)."""
        return self.model_dump_json(by_alias=True, exclude_none=True)
