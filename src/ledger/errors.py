# src/ledger/errors.py — v1
"""Ledger exceptions."""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for ledger failures."""


class LedgerOrderError(LedgerError):
    """Append refused: iteration id is not strictly greater than the latest one."""


class LedgerCorruptError(LedgerError):
    """Persisted ledger cannot be read back as a valid, ordered sequence."""
