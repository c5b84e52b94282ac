# src/ledger/__init__.py — v1
"""Append-only iteration ledger: entry model, store, backends, queries."""
