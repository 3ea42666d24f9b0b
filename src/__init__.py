# src/__init__.py — v1
"""spamsentinel — LLM-backed spam classification with caching and consensus."""

from spamsentinel.version import __version__

__all__ = ["__version__"]
