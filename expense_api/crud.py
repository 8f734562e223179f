"""CRUD helper functions for the expense tracking backend."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import exists, select, update
from sqlalchemy.orm import Session

from . import models, schemas


class EntityNotFoundError(RuntimeError):
    """Raised when an entity cannot be located in the database."""


class EntityConflictError(RuntimeError):
    """Raised when an UPDATE touched no row, i.e. the row changed under us."""


class IdentifierMismatchError(ValueError):
    """Raised when a payload id disagrees with the id it is written to."""


def _check_identifier(entity_id: int, payload_id: int) -> None:
    if entity_id != payload_id:
        raise IdentifierMismatchError(f"Path id {entity_id} does not match body id {payload_id}")


def _row_exists(session: Session, model: Type[Any], entity_id: int) -> bool:
    return bool(session.scalar(select(exists().where(model.id == entity_id))))


def _write_row(session: Session, model: Type[Any], entity_id: int, values: Dict[str, Any]) -> None:
    result = session.execute(update(model).where(model.id == entity_id).values(**values))
    if result.rowcount != 1:
        raise EntityConflictError(f"{model.__name__} {entity_id} was modified or removed concurrently")
    session.flush()


def list_expenses(session: Session) -> List[models.Expense]:
    return list(session.scalars(select(models.Expense)))


def get_expense(session: Session, expense_id: int) -> models.Expense:
    expense = session.get(models.Expense, expense_id)
    if expense is None:
        raise EntityNotFoundError(f"Expense {expense_id} not found")
    return expense


def expense_exists(session: Session, expense_id: int) -> bool:
    return _row_exists(session, models.Expense, expense_id)


def create_expense(
    session: Session,
    expense_in: schemas.ExpenseCreate,
    created_by: Optional[str] = None,
    now: Optional[datetime] = None,
) -> models.Expense:
    """Insert an expense, stamping the audit fields.

    ``created_by`` is the caller identity; ``"System"`` is recorded when it is
    missing or blank.
    """
    stamp = now or models.utcnow()
    data = expense_in.model_dump()
    if data.get("date") is None:
        data["date"] = stamp
    expense = models.Expense(
        **data,
        created_at=stamp,
        created_by=(created_by or "").strip() or models.SYSTEM_IDENTITY,
    )
    session.add(expense)
    session.flush()
    session.refresh(expense)
    return expense


def update_expense(
    session: Session,
    expense_id: int,
    update_in: schemas.ExpenseUpdate,
    now: Optional[datetime] = None,
) -> None:
    """Overwrite every writable column of an expense and stamp ``updated_at``.

    ``created_at`` and ``created_by`` are never written. Raises
    :class:`EntityConflictError` when no row matched.
    """
    _check_identifier(expense_id, update_in.id)
    values = update_in.model_dump(exclude=set(models.EXPENSE_IMMUTABLE_COLUMNS))
    stamp = now or models.utcnow()
    if values.get("date") is None:
        values.pop("date", None)
    values["updated_at"] = stamp
    _write_row(session, models.Expense, expense_id, values)


def delete_expense(session: Session, expense_id: int) -> None:
    expense = get_expense(session, expense_id)
    session.delete(expense)
    session.flush()


def list_authorized_users(session: Session) -> List[models.AuthorizedUser]:
    return list(session.scalars(select(models.AuthorizedUser)))


def get_authorized_user(session: Session, user_id: int) -> models.AuthorizedUser:
    user = session.get(models.AuthorizedUser, user_id)
    if user is None:
        raise EntityNotFoundError(f"Authorized user {user_id} not found")
    return user


def authorized_user_exists(session: Session, user_id: int) -> bool:
    return _row_exists(session, models.AuthorizedUser, user_id)


def create_authorized_user(session: Session, user_in: schemas.AuthorizedUserCreate) -> models.AuthorizedUser:
    user = models.AuthorizedUser(**user_in.model_dump())
    session.add(user)
    session.flush()
    session.refresh(user)
    return user


def update_authorized_user(session: Session, user_id: int, update_in: schemas.AuthorizedUserUpdate) -> None:
    _check_identifier(user_id, update_in.id)
    _write_row(session, models.AuthorizedUser, user_id, update_in.model_dump(exclude={"id"}))


def delete_authorized_user(session: Session, user_id: int) -> None:
    user = get_authorized_user(session, user_id)
    session.delete(user)
    session.flush()
