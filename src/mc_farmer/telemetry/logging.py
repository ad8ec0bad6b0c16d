"""Logging setup: structured event records rendered for the terminal and the in-game console."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from mc_farmer.adapters.farm_world import FarmWorld

_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def record_fields(record: logging.LogRecord) -> dict[str, object]:
    """Return the ``extra=`` fields attached to a record."""
    return {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES}


class KeyValueFormatter(logging.Formatter):
    """Appends ``key=value`` pairs for every extra field to the event name."""

    def formatMessage(self, record: logging.LogRecord) -> str:
        message = super().formatMessage(record)
        fields = record_fields(record)
        if not fields:
            return message
        rendered = " ".join(f"{key}={value}" for key, value in fields.items())
        return f"{message} {rendered}"


class WorldConsoleHandler(logging.Handler):
    """Forwards log records to the game client's console."""

    def __init__(self, world: FarmWorld, level: int = logging.INFO) -> None:
        super().__init__(level)
        self._world = world
        self.setFormatter(KeyValueFormatter("[%(levelname)s] %(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._world.log(self.format(record))
        except Exception:  # noqa: BLE001
            self.handleError(record)


def configure_logging(level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger("mc_farmer")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(show_path=False, markup=False)
    handler.setFormatter(KeyValueFormatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger
