from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from expense_api import crud, models, schemas


def _expense_in(**overrides) -> schemas.ExpenseCreate:
    data = {
        "description": "Groceries",
        "date": datetime(2026, 10, 1, 12, 0),
        "amount": Decimal("75.50"),
        "paid_by": models.PaymentSource.YOU,
        "split_type": models.SplitType.EQUAL,
        "category": "Food",
    }
    data.update(overrides)
    return schemas.ExpenseCreate(**data)


def _update_from(expense: models.Expense, **overrides) -> schemas.ExpenseUpdate:
    data = {
        "id": expense.id,
        "description": expense.description,
        "date": expense.date,
        "amount": expense.amount,
        "paid_by": expense.paid_by,
        "split_type": expense.split_type,
        "your_percentage": expense.your_percentage,
        "currency": expense.currency,
        "category": expense.category,
        "notes": expense.notes,
    }
    data.update(overrides)
    return schemas.ExpenseUpdate(**data)


def test_create_expense_assigns_id_and_audit_fields(db_session):
    before = models.utcnow()
    expense = crud.create_expense(db_session, _expense_in(), created_by="test@example.com")

    assert expense.id is not None and expense.id > 0
    assert expense.created_by == "test@example.com"
    assert expense.created_at >= before
    assert expense.updated_at is None
    assert expense.currency == "USD"
    assert expense.amount == Decimal("75.50")


def test_create_expense_without_identity_records_system(db_session):
    expense = crud.create_expense(db_session, _expense_in())
    assert expense.created_by == "System"

    blank = crud.create_expense(db_session, _expense_in(), created_by="   ")
    assert blank.created_by == "System"


def test_create_expense_defaults_date_to_creation_time(db_session):
    stamp = datetime(2026, 10, 19, 8, 0)
    expense = crud.create_expense(db_session, _expense_in(date=None), now=stamp)
    assert expense.date == stamp
    assert expense.created_at == stamp


def test_created_ids_are_unique(db_session):
    ids = {crud.create_expense(db_session, _expense_in(description=f"Item {n}")).id for n in range(5)}
    assert len(ids) == 5
    assert len(crud.list_expenses(db_session)) == 5


def test_update_expense_preserves_creation_audit_fields(db_session):
    created_at = datetime(2026, 1, 1, 9, 0)
    expense = crud.create_expense(db_session, _expense_in(), created_by="owner@example.com", now=created_at)
    expense_id = expense.id

    call_time = models.utcnow()
    crud.update_expense(db_session, expense_id, _update_from(expense, description="Fancy Dinner", amount=Decimal("75.00")))
    db_session.expire_all()

    stored = crud.get_expense(db_session, expense_id)
    assert stored.description == "Fancy Dinner"
    assert stored.amount == Decimal("75.00")
    assert stored.created_at == created_at
    assert stored.created_by == "owner@example.com"
    assert stored.updated_at is not None and stored.updated_at >= call_time


def test_update_expense_rejects_mismatched_id_before_writing(db_session):
    expense = crud.create_expense(db_session, _expense_in())
    payload = _update_from(expense, id=expense.id + 100, description="Changed")

    with pytest.raises(crud.IdentifierMismatchError):
        crud.update_expense(db_session, expense.id, payload)

    db_session.expire_all()
    assert crud.get_expense(db_session, expense.id).description == "Groceries"


def test_update_missing_expense_reports_conflict(db_session):
    expense = crud.create_expense(db_session, _expense_in())
    payload = _update_from(expense, id=9999)

    with pytest.raises(crud.EntityConflictError):
        crud.update_expense(db_session, 9999, payload)
    assert crud.expense_exists(db_session, 9999) is False


def test_update_without_date_keeps_stored_date(db_session):
    expense = crud.create_expense(db_session, _expense_in())
    original_date = expense.date

    crud.update_expense(db_session, expense.id, _update_from(expense, date=None, notes="moved"))
    db_session.expire_all()

    stored = crud.get_expense(db_session, expense.id)
    assert stored.date == original_date
    assert stored.notes == "moved"


def test_your_percentage_is_stored_as_given(db_session):
    expense = crud.create_expense(
        db_session,
        _expense_in(split_type=models.SplitType.EQUAL, your_percentage=Decimal("33.33")),
    )
    assert expense.your_percentage == Decimal("33.33")
    assert expense.split_type is models.SplitType.EQUAL


def test_delete_expense(db_session):
    expense = crud.create_expense(db_session, _expense_in())
    crud.delete_expense(db_session, expense.id)

    with pytest.raises(crud.EntityNotFoundError):
        crud.get_expense(db_session, expense.id)
    assert crud.list_expenses(db_session) == []


def test_delete_missing_expense(db_session):
    with pytest.raises(crud.EntityNotFoundError):
        crud.delete_expense(db_session, 404)


def test_authorized_user_lifecycle(db_session):
    user = crud.create_authorized_user(
        db_session, schemas.AuthorizedUserCreate(email="a@example.com", name="Alex")
    )
    assert user.id > 0
    assert user.is_admin is False

    crud.update_authorized_user(
        db_session,
        user.id,
        schemas.AuthorizedUserUpdate(id=user.id, email="a@example.com", name="Alex", is_admin=True),
    )
    db_session.expire_all()
    assert crud.get_authorized_user(db_session, user.id).is_admin is True

    crud.delete_authorized_user(db_session, user.id)
    with pytest.raises(crud.EntityNotFoundError):
        crud.get_authorized_user(db_session, user.id)


def test_authorized_user_email_is_not_unique(db_session):
    first = crud.create_authorized_user(db_session, schemas.AuthorizedUserCreate(email="dup@example.com"))
    second = crud.create_authorized_user(db_session, schemas.AuthorizedUserCreate(email="dup@example.com"))

    assert first.id != second.id
    assert len(crud.list_authorized_users(db_session)) == 2


def test_update_authorized_user_rejects_mismatched_id(db_session):
    user = crud.create_authorized_user(db_session, schemas.AuthorizedUserCreate(email="b@example.com"))
    with pytest.raises(crud.IdentifierMismatchError):
        crud.update_authorized_user(
            db_session,
            user.id,
            schemas.AuthorizedUserUpdate(id=user.id + 1, email="c@example.com"),
        )


def test_update_timestamp_uses_supplied_clock(db_session):
    expense = crud.create_expense(db_session, _expense_in())
    stamp = models.utcnow() + timedelta(minutes=5)

    crud.update_expense(db_session, expense.id, _update_from(expense), now=stamp)
    db_session.expire_all()
    assert crud.get_expense(db_session, expense.id).updated_at == stamp
