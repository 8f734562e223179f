"""Structured logging helpers for the expense tracking backend.

Nothing here reads the environment: callers pass the level, JSON toggle and
log directory resolved by :func:`expense_api.config.load_settings` (the HTTP
app) or by command-line flags (the CLI).
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Final

from expense_api.config import DEFAULT_LOG_DIR

CONSOLE_FORMAT: Final[str] = "[%(levelname)s] %(name)s: %(message)s"
LOG_FILENAME: Final[str] = "expense_api.log"
ROOT_LOGGER: Final[str] = "expense_api"

# Request/entity attributes passed through ``extra=`` and copied into JSON lines.
_INT_FIELDS: Final[tuple[str, ...]] = ("status_code", "entity_id")
_TEXT_FIELDS: Final[tuple[str, ...]] = ("method", "path")


class JsonAuditFormatter(logging.Formatter):
    """Render log records as single-line JSON payloads."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "source": record.name,
            "message": record.getMessage(),
        }
        for name in _TEXT_FIELDS:
            payload[name] = getattr(record, name, None)
        for name in _INT_FIELDS:
            payload[name] = _as_int(getattr(record, name, None))
        duration = getattr(record, "duration_ms", None)
        payload["duration_ms"] = round(float(duration), 3) if isinstance(duration, (int, float)) else None
        return json.dumps(payload, ensure_ascii=False)


def _as_int(value: object) -> int | None:
    try:
        return None if value is None else int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    if level:
        resolved = logging.getLevelName(level.strip().upper())
        if isinstance(resolved, int):
            return resolved
    return logging.INFO


def log_path(log_dir: str | Path | None = None) -> Path:
    """Location of the JSON audit log inside ``log_dir``."""

    return Path(log_dir if log_dir is not None else DEFAULT_LOG_DIR) / LOG_FILENAME


def _marked(logger: logging.Logger, marker: str) -> logging.Handler | None:
    return next((h for h in logger.handlers if getattr(h, marker, False)), None)


def _attach(logger: logging.Logger, handler: logging.Handler, marker: str) -> None:
    setattr(handler, marker, True)
    logger.addHandler(handler)


def setup_logger(
    name: str,
    json_format: bool = False,
    level: str | int | None = None,
    log_dir: str | Path | None = None,
) -> logging.Logger:
    """Configure and return a logger for an ``expense_api`` module.

    Handlers are attached once per logger and only have their level refreshed
    on later calls. The JSON file handler is added when ``json_format`` is set.
    """

    resolved = _level(level)
    logger = logging.getLogger(name)
    logger.setLevel(resolved)
    # Keep propagation on so pytest's caplog still sees the records.
    logger.propagate = True

    console = _marked(logger, "_expense_console")
    if console is None:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        _attach(logger, console, "_expense_console")
    console.setLevel(resolved)

    if json_format:
        json_handler = _marked(logger, "_expense_json")
        if json_handler is None:
            path = log_path(log_dir)
            path.parent.mkdir(parents=True, exist_ok=True)
            json_handler = logging.FileHandler(path, encoding="utf-8")
            json_handler.setFormatter(JsonAuditFormatter())
            _attach(logger, json_handler, "_expense_json")
        json_handler.setLevel(resolved)
    return logger


def configure_cli_logging(
    json_logs: bool,
    level: str | int | None = None,
    log_dir: str | Path | None = None,
) -> None:
    """Reconfigure the ``expense_api`` loggers that already carry our handlers."""

    setup_logger(ROOT_LOGGER, json_format=json_logs, level=level, log_dir=log_dir)
    # Children propagate to the root, so they only need their level refreshed.
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if not isinstance(logger, logging.Logger) or not name.startswith(ROOT_LOGGER + "."):
            continue
        if _marked(logger, "_expense_console") is not None:
            setup_logger(name, level=level)


__all__ = ["JsonAuditFormatter", "setup_logger", "configure_cli_logging", "log_path"]
