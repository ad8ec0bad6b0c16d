"""Logging setup for terminals and the in-game console."""

from .logging import KeyValueFormatter, WorldConsoleHandler, configure_logging

__all__ = ["KeyValueFormatter", "WorldConsoleHandler", "configure_logging"]
