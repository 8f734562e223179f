"""Environment-driven settings for the expense tracking backend."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Tuple

DEFAULT_SQLITE_PATH: Final[Path] = Path(__file__).with_name("expenses.db")
DEFAULT_IDENTITY_HEADER: Final[str] = "X-Forwarded-User"
DEFAULT_LOG_DIR: Final[Path] = Path("artifacts") / "logs"


@dataclass(frozen=True)
class Settings:
    """Runtime configuration resolved from ``EXPENSE_*`` environment variables."""

    database_url: str
    identity_header: str = DEFAULT_IDENTITY_HEADER
    cors_origins: Tuple[str, ...] = ("*",)
    log_level: str = "INFO"
    json_logs: bool = False
    log_dir: Path = DEFAULT_LOG_DIR
    host: str = "127.0.0.1"
    port: int = 8000


def _flag(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _origins(value: str | None) -> Tuple[str, ...]:
    if not value:
        return ("*",)
    return tuple(item.strip() for item in value.split(",") if item.strip()) or ("*",)


def load_settings() -> Settings:
    """Read the current environment into a :class:`Settings` instance."""

    db_path = os.environ.get("EXPENSE_DB_PATH", str(DEFAULT_SQLITE_PATH))
    database_url = os.environ.get("EXPENSE_DATABASE_URL") or f"sqlite:///{db_path}"
    port = os.environ.get("EXPENSE_PORT", "8000")
    try:
        resolved_port = int(port)
    except ValueError as exc:
        raise ValueError(f"EXPENSE_PORT must be an integer, got {port!r}") from exc
    return Settings(
        database_url=database_url,
        identity_header=os.environ.get("EXPENSE_IDENTITY_HEADER", DEFAULT_IDENTITY_HEADER),
        cors_origins=_origins(os.environ.get("EXPENSE_CORS_ORIGINS")),
        log_level=os.environ.get("EXPENSE_LOG_LEVEL", "INFO").strip().upper(),
        json_logs=_flag(os.environ.get("EXPENSE_JSON_LOGS")),
        log_dir=Path(os.environ.get("EXPENSE_LOG_DIR", str(DEFAULT_LOG_DIR))),
        host=os.environ.get("EXPENSE_HOST", "127.0.0.1"),
        port=resolved_port,
    )


__all__ = ["Settings", "load_settings", "DEFAULT_IDENTITY_HEADER", "DEFAULT_SQLITE_PATH"]
