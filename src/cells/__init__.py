# src/cells/__init__.py — v1
"""Cell manifest/pipeline validation and structural checks."""
