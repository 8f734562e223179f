"""Command-line interface for running and provisioning the expense API."""

from __future__ import annotations

import argparse
from pathlib import Path

import uvicorn

from expense_api import database
from expense_api.config import DEFAULT_LOG_DIR, load_settings
from expense_api.logging import configure_cli_logging

DESCRIPTION = "Expense Tracker API"


def _add_init_db_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    init_db = subparsers.add_parser("init-db", help="Create the database tables")
    init_db.add_argument(
        "--database-url",
        help="SQLAlchemy URL overriding EXPENSE_DATABASE_URL",
    )


def _add_serve_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    serve = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", help="Interface to bind (default: EXPENSE_HOST)")
    serve.add_argument("--port", type=int, help="Port to bind (default: EXPENSE_PORT)")
    serve.add_argument(
        "--database-url",
        help="SQLAlchemy URL overriding EXPENSE_DATABASE_URL",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="expense-api", description=DESCRIPTION)
    parser.add_argument(
        "--json-logs",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Also write JSON-lines logs to --log-dir",
    )
    parser.add_argument("--log-level", default="INFO", help="Console and file log level")
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=DEFAULT_LOG_DIR,
        help="Directory receiving the JSON-lines log",
    )
    subparsers = parser.add_subparsers(dest="cmd", required=True)
    _add_init_db_subparser(subparsers)
    _add_serve_subparser(subparsers)
    return parser


def _handle_init_db(args: argparse.Namespace) -> None:
    if args.database_url:
        database.configure_engine(args.database_url)
    database.init_db()
    url = database.engine.url.render_as_string(hide_password=True)
    print(f"[expense-api] init-db url={url}")


def _handle_serve(args: argparse.Namespace) -> None:
    if args.database_url:
        database.configure_engine(args.database_url)
    settings = load_settings()
    from expense_api.server import app

    host = args.host or settings.host
    port = args.port if args.port is not None else settings.port
    uvicorn.run(app, host=host, port=port)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_cli_logging(json_logs=bool(args.json_logs), level=args.log_level, log_dir=args.log_dir)
    if args.cmd == "init-db":
        _handle_init_db(args)
    elif args.cmd == "serve":
        _handle_serve(args)
    else:  # pragma: no cover - argparse rejects unknown commands
        print(f"[expense-api] command = {args.cmd}")


if __name__ == "__main__":
    main()
