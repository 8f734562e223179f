"""Pydantic schemas for serialising expense tracking data.

Field names are snake_case in Python and camelCase on the wire. Incoming
payloads are matched case-insensitively, so ``paidBy``, ``PaidBy`` and
``paidby`` all populate :attr:`ExpenseBase.paid_by`.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .models import PaymentSource, SplitType


class APIModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _match_keys_case_insensitively(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        lookup: Dict[str, str] = {}
        for name, field in cls.model_fields.items():
            alias = field.alias or name
            lookup[name.lower()] = alias
            lookup[alias.lower()] = alias
        return {lookup.get(str(key).lower(), key): value for key, value in data.items()}


class ORMModel(APIModel):
    model_config = ConfigDict(from_attributes=True)


class ExpenseBase(APIModel):
    description: str = Field(..., min_length=1, max_length=200)
    date: Optional[datetime] = None
    amount: Decimal = Field(..., max_digits=18, decimal_places=2)
    paid_by: PaymentSource
    split_type: SplitType
    your_percentage: Optional[Decimal] = Field(None, max_digits=5, decimal_places=2)
    currency: str = Field("USD", min_length=3, max_length=3)
    category: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None

    @field_validator("paid_by", "split_type", mode="before")
    @classmethod
    def _accept_ordinals(cls, value: Any, info: ValidationInfo) -> Any:
        # Older clients send enums as their declaration index.
        if isinstance(value, int) and not isinstance(value, bool):
            members = list(PaymentSource if info.field_name == "paid_by" else SplitType)
            if 0 <= value < len(members):
                return members[value]
        return value


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseUpdate(ExpenseBase):
    # Missing id reads as 0, which never matches a stored row.
    id: int = 0


class ExpenseRead(ExpenseBase, ORMModel):
    id: int
    date: datetime
    created_at: datetime
    updated_at: Optional[datetime] = None
    created_by: str


class AuthorizedUserBase(APIModel):
    email: str = Field(..., min_length=1, max_length=100)
    name: Optional[str] = Field(None, max_length=100)
    is_admin: bool = False


class AuthorizedUserCreate(AuthorizedUserBase):
    pass


class AuthorizedUserUpdate(AuthorizedUserBase):
    id: int = 0


class AuthorizedUserRead(AuthorizedUserBase, ORMModel):
    id: int
