"""Résumé parsing with ranked text-extraction adapters."""

__version__ = "0.1.0"
