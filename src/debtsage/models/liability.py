"""Debt and liability entities."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Liability(SQLModel, table=True):
    """Installment or revolving debt tracked in DebtSage."""

    __tablename__: ClassVar[str] = "liability"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(default=1, nullable=False, index=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    category: str = Field(default="other", max_length=40)
    original_amount: float = Field(default=0.0, nullable=False)
    current_balance: float = Field(nullable=False)
    # Nullable on purpose: the payoff engine fills defaults for missing values.
    interest_rate: Optional[float] = Field(default=None)
    minimum_payment: Optional[float] = Field(default=None)
    due_day: int = Field(default=1, ge=1, le=28)
    currency: str = Field(default="USD", max_length=3)
    notes: Optional[str] = Field(default=None)
    debt_type: str = Field(default="bad", max_length=8)  # "good" or "bad"
    generates_income: bool = Field(default=False)
    monthly_income_generated: float = Field(default=0.0)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)
