from __future__ import annotations


class ConfigError(RuntimeError):
    """Raised when configuration is missing or invalid."""


class PageError(RuntimeError):
    """Raised when an HTML page cannot be read or parsed."""
