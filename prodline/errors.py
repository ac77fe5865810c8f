"""Exceptions raised by the production line simulator."""
from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a line configuration or run horizon is invalid."""
