"""HTTP handlers for the ``/api/expenses`` resource."""
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from .. import crud, database, schemas
from ..identity import current_identity

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("", response_model=List[schemas.ExpenseRead])
def list_expenses(db: Session = Depends(database.get_db)) -> List[schemas.ExpenseRead]:
    return crud.list_expenses(db)


@router.get("/{expense_id}", response_model=schemas.ExpenseRead)
def get_expense(expense_id: int, db: Session = Depends(database.get_db)) -> schemas.ExpenseRead:
    try:
        return crud.get_expense(db, expense_id)
    except crud.EntityNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post("", response_model=schemas.ExpenseRead, status_code=status.HTTP_201_CREATED)
def create_expense(
    expense_in: schemas.ExpenseCreate,
    request: Request,
    response: Response,
    db: Session = Depends(database.get_db),
    identity: Optional[str] = Depends(current_identity),
) -> schemas.ExpenseRead:
    expense = crud.create_expense(db, expense_in, created_by=identity)
    response.headers["Location"] = str(request.url_for("get_expense", expense_id=expense.id))
    LOG.info("Created expense %s", expense.id, extra={"entity_id": expense.id})
    return expense


@router.put("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_expense(
    expense_id: int,
    update_in: schemas.ExpenseUpdate,
    db: Session = Depends(database.get_db),
) -> None:
    try:
        crud.update_expense(db, expense_id, update_in)
    except crud.IdentifierMismatchError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except crud.EntityConflictError as exc:
        if not crud.expense_exists(db, expense_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=f"Expense {expense_id} not found"
            ) from exc
        LOG.warning("Concurrent update on expense %s", expense_id, extra={"entity_id": expense_id})
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    LOG.info("Updated expense %s", expense_id, extra={"entity_id": expense_id})


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(expense_id: int, db: Session = Depends(database.get_db)) -> None:
    try:
        crud.delete_expense(db, expense_id)
    except crud.EntityNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    LOG.info("Deleted expense %s", expense_id, extra={"entity_id": expense_id})
