# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for Cell layout conventions, ledger storage and
logging. Every field can be overridden with a ``CELLGOV_`` environment
variable.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CELLGOV_",
        extra="ignore",
    )

    # === Cell layout ===
    manifest_filename: str = "manifest.json"
    pipeline_filename: str = "pipeline.yaml"
    required_cell_files: str = "manifest.json,pipeline.yaml,component.tsx,state.ts"
    optional_cell_files: str = "README.md,index.ts"

    # === Structural checks ===
    warn_on_disabled_gates: bool = True

    # === Ledger ===
    ledger_backend: Literal["jsonl", "memory"] = "jsonl"
    ledger_path: Path = Path("ledger.jsonl")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("log_retention")
    @classmethod
    def validate_log_retention(cls, v: int) -> int:
        if v < 0:
            raise ValueError("log_retention must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []
        required = set(self.required_cell_files_list)
        optional = set(self.optional_cell_files_list)

        overlap = sorted(required & optional)
        if overlap:
            errors.append(
                "Files listed as both required and optional: " + ", ".join(overlap)
            )

        if self.manifest_filename == self.pipeline_filename:
            errors.append("MANIFEST_FILENAME and PIPELINE_FILENAME must differ")

        for name in (self.manifest_filename, self.pipeline_filename):
            if name not in required:
                errors.append(f"{name} must be listed in REQUIRED_CELL_FILES")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def required_cell_files_list(self) -> list[str]:
        """Parse comma-separated required file names."""
        return [f.strip() for f in self.required_cell_files.split(",") if f.strip()]

    @property
    def optional_cell_files_list(self) -> list[str]:
        """Parse comma-separated optional file names."""
        return [f.strip() for f in self.optional_cell_files.split(",") if f.strip()]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-call config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
