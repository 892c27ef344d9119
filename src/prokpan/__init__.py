"""Prokka + Panaroo annotation and pangenome orchestration."""

__version__ = "0.1.0"
