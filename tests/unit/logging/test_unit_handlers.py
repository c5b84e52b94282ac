# tests/unit/logging/test_unit_handlers.py — v1
"""Tests for logging/handlers.py — size parsing and rotating handler."""

from __future__ import annotations

from logging.handlers import RotatingFileHandler

import pytest

from cellgov.logging.handlers import create_rotating_handler, parse_size


class TestParseSize:
    @pytest.mark.parametrize(
        "text,expected",
        [("10MB", 10 * 1024**2), ("512kb", 512 * 1024), ("1GB", 1024**3), ("2048", 2048), ("7 B", 7)],
    )
    def test_valid(self, text, expected):
        assert parse_size(text) == expected

    @pytest.mark.parametrize("text", ["", "MB", "10TB", "-1MB", "1.5MB"])
    def test_invalid(self, text):
        with pytest.raises(ValueError, match="Invalid size format"):
            parse_size(text)


class TestCreateRotatingHandler:
    def test_creates_parent_dir(self, tmp_path):
        log_file = tmp_path / "a" / "b" / "app.log"
        handler = create_rotating_handler(log_file, rotation="1KB", retention=2)
        try:
            assert isinstance(handler, RotatingFileHandler)
            assert log_file.parent.is_dir()
            assert handler.maxBytes == 1024
            assert handler.backupCount == 2
        finally:
            handler.close()
