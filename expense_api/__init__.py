"""Expense tracking REST backend built on FastAPI and SQLAlchemy."""

__all__ = [
    "config",
    "database",
    "models",
    "schemas",
    "crud",
    "identity",
    "routes",
    "server",
    "cli",
]
