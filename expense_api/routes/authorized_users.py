"""HTTP handlers for the ``/api/authorizedusers`` allow-list."""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from .. import crud, database, schemas

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/authorizedusers", tags=["authorized users"])


@router.get("", response_model=List[schemas.AuthorizedUserRead])
def list_authorized_users(db: Session = Depends(database.get_db)) -> List[schemas.AuthorizedUserRead]:
    return crud.list_authorized_users(db)


@router.get("/{user_id}", response_model=schemas.AuthorizedUserRead)
def get_authorized_user(user_id: int, db: Session = Depends(database.get_db)) -> schemas.AuthorizedUserRead:
    try:
        return crud.get_authorized_user(db, user_id)
    except crud.EntityNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post("", response_model=schemas.AuthorizedUserRead, status_code=status.HTTP_201_CREATED)
def create_authorized_user(
    user_in: schemas.AuthorizedUserCreate,
    request: Request,
    response: Response,
    db: Session = Depends(database.get_db),
) -> schemas.AuthorizedUserRead:
    user = crud.create_authorized_user(db, user_in)
    response.headers["Location"] = str(request.url_for("get_authorized_user", user_id=user.id))
    LOG.info("Created authorized user %s", user.id, extra={"entity_id": user.id})
    return user


@router.put("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_authorized_user(
    user_id: int,
    update_in: schemas.AuthorizedUserUpdate,
    db: Session = Depends(database.get_db),
) -> None:
    try:
        crud.update_authorized_user(db, user_id, update_in)
    except crud.IdentifierMismatchError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except crud.EntityConflictError as exc:
        if not crud.authorized_user_exists(db, user_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=f"Authorized user {user_id} not found"
            ) from exc
        LOG.warning("Concurrent update on authorized user %s", user_id, extra={"entity_id": user_id})
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    LOG.info("Updated authorized user %s", user_id, extra={"entity_id": user_id})


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_authorized_user(user_id: int, db: Session = Depends(database.get_db)) -> None:
    try:
        crud.delete_authorized_user(db, user_id)
    except crud.EntityNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    LOG.info("Deleted authorized user %s", user_id, extra={"entity_id": user_id})
