"""SQLAlchemy models for the expense tracking backend."""
from __future__ import annotations

import enum
from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, Numeric, String, Text, false

from .database import Base

SYSTEM_IDENTITY = "System"


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what the ``DateTime`` columns round-trip."""
    return datetime.now(UTC).replace(tzinfo=None)


class PaymentSource(str, enum.Enum):
    YOU = "You"
    PARTNER = "Partner"


class SplitType(str, enum.Enum):
    EQUAL = "Equal"
    CUSTOM = "Custom"
    YOU_PAY = "YouPay"
    PARTNER_PAYS = "PartnerPays"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    description = Column(String(200), nullable=False)
    date = Column(DateTime, nullable=False, default=utcnow)
    amount = Column(Numeric(18, 2), nullable=False)
    paid_by = Column(
        Enum(PaymentSource, name="payment_source", native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
    )
    split_type = Column(
        Enum(SplitType, name="split_type", native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
    )
    # Advisory only; nothing computes splits from it.
    your_percentage = Column(Numeric(5, 2), nullable=True)
    currency = Column(String(3), nullable=False, default="USD", server_default="USD")
    category = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True)
    created_by = Column(String(100), nullable=False, default=SYSTEM_IDENTITY)


# Columns written once at creation and never part of an UPDATE.
EXPENSE_IMMUTABLE_COLUMNS = frozenset({"id", "created_at", "created_by"})


class AuthorizedUser(Base):
    __tablename__ = "authorized_users"

    id = Column(Integer, primary_key=True, index=True)
    # No unique constraint on email.
    email = Column(String(100), nullable=False)
    name = Column(String(100), nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())
