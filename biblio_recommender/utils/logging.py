"""
Root logger setup for the ``biblio-recommender`` CLI.

Only ``cli.py`` calls ``configure_logging``; engine and ingestion modules
just use ``logging.getLogger(__name__)``. Ingestion reports skipped ledger
rows and duplicate catalog ids at WARNING, the engines report fallbacks at
DEBUG.

With ``json_format = true`` each record becomes one JSON line, and values
passed through ``extra=`` become top-level keys::

    {"ts": "2025-03-15T09:00:00Z", "level": "WARNING",
     "logger": "biblio_recommender.ingestion.ledger", "msg": "..."}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from biblio_recommender.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_BUILTIN_RECORD_KEYS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict = {
            "ts": stamp.strftime(LOG_DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(
            (key, val) for key, val in record.__dict__.items()
            if key not in _BUILTIN_RECORD_KEYS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _make_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return _JsonFormatter()
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def _make_handlers(log_file: str) -> list[logging.Handler]:
    """stdout always; a UTF-8 file handler too when ``log_file`` is set."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    return handlers


def configure_logging(config: "LoggingConfig") -> None:
    """Replace the root logger's handlers according to ``config``.

    Safe to call more than once; each call discards the previous handlers.
    """
    level = logging.getLevelName(config.level)
    formatter = _make_formatter(config.json_format)
    handlers = _make_handlers(config.log_file)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=handlers, force=True)
