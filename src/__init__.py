# src/__init__.py — v1
"""cellgov — Cell contract validation and iteration provenance ledger."""

from cellgov.version import __version__

__all__ = ["__version__"]
