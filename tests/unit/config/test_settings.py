# tests/unit/config/test_settings.py — v1
"""Tests for config/settings.py — typed Settings and validation rules."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from cellgov.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_default_cell_layout(self):
        s = Settings(_env_file=None)
        assert s.manifest_filename == "manifest.json"
        assert s.pipeline_filename == "pipeline.yaml"
        assert s.required_cell_files_list == [
            "manifest.json", "pipeline.yaml", "component.tsx", "state.ts",
        ]
        assert s.optional_cell_files_list == ["README.md", "index.ts"]

    def test_default_ledger(self):
        s = Settings(_env_file=None)
        assert s.ledger_backend == "jsonl"
        assert s.ledger_path == Path("ledger.jsonl")

    def test_default_logging(self):
        s = Settings(_env_file=None)
        assert s.log_level == "INFO"
        assert s.log_format == "text"
        assert s.log_file is None
        assert s.warn_on_disabled_gates is True


class TestSettingsValidation:
    def test_overlap_required_optional(self):
        with pytest.raises(ConfigurationError, match="both required and optional"):
            Settings(_env_file=None, optional_cell_files="state.ts")

    def test_same_document_filenames(self):
        with pytest.raises(ConfigurationError, match="must differ"):
            Settings(
                _env_file=None,
                manifest_filename="cell.json",
                pipeline_filename="cell.json",
                required_cell_files="cell.json",
            )

    def test_manifest_must_be_required(self):
        with pytest.raises(ConfigurationError, match="cell.json must be listed"):
            Settings(_env_file=None, manifest_filename="cell.json")

    def test_negative_retention(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_retention=-1)

    def test_unknown_backend(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, ledger_backend="sqlite")

    def test_list_parsing_ignores_blanks(self):
        s = Settings(
            _env_file=None,
            required_cell_files=" manifest.json , pipeline.yaml,,",
            optional_cell_files="",
        )
        assert s.required_cell_files_list == ["manifest.json", "pipeline.yaml"]
        assert s.optional_cell_files_list == []


class TestEnvironment:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("CELLGOV_LEDGER_BACKEND", "memory")
        monkeypatch.setenv("CELLGOV_WARN_ON_DISABLED_GATES", "false")
        s = Settings(_env_file=None)
        assert s.ledger_backend == "memory"
        assert s.warn_on_disabled_gates is False

    def test_env_file(self, tmp_path: Path):
        env = tmp_path / ".env"
        env.write_text("CELLGOV_LOG_LEVEL=DEBUG\n", encoding="utf-8")
        assert Settings(_env_file=str(env)).log_level == "DEBUG"


class TestLoadSettings:
    def test_overrides(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        s = load_settings(log_format="json")
        assert s.log_format == "json"
