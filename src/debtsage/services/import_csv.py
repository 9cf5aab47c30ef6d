"""CSV ingestion for debt lists."""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Optional

import pandas as pd

from ..logging_config import get_logger
from ..models.liability import Liability
from .debts import DebtAccount

logger = get_logger(__name__)


@dataclass(slots=True)
class ColumnMapping:
    """Maps debt fields to CSV headers (lower-cased)."""

    balance: str = "current_balance"
    name: str = "name"
    id: str | None = "id"
    category: str | None = "category"
    interest_rate: str | None = "interest_rate"
    minimum_payment: str | None = "minimum_payment"


# Accepted spellings, normalized onto the default mapping.
HEADER_ALIASES = {
    "balance": "current_balance",
    "apr": "interest_rate",
    "rate": "interest_rate",
    "min_payment": "minimum_payment",
    "minimum": "minimum_payment",
}


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file into a DataFrame with consistent column casing."""

    frame = pd.read_csv(file_path, encoding=encoding, dtype=str, keep_default_na=False)
    frame.columns = [HEADER_ALIASES.get(c.strip().lower(), c.strip().lower()) for c in frame.columns]
    return frame


def _optional_float(raw) -> Optional[float]:
    if raw is None:
        return None
    text = str(raw).strip().replace(",", "").lstrip("$").rstrip("%")
    if not text:
        return None
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Not a finite amount: {raw!r}")
    return value


def parse_debt_rows(*, rows: Iterable[Mapping], mapping: ColumnMapping) -> list[DebtAccount]:
    """Convert dict-like rows into :class:`DebtAccount` inputs.

    Rows without a parseable balance are skipped. Blank optional cells
    become ``None`` so the payoff engine can apply its defaults.
    """

    debts: list[DebtAccount] = []
    for index, row in enumerate(rows, start=1):
        try:
            balance = _optional_float(row.get(mapping.balance))
        except ValueError:
            balance = None
        if balance is None:
            logger.warning("Skipping CSV row without a usable balance", extra={"row": index})
            continue

        try:
            rate = _optional_float(row.get(mapping.interest_rate)) if mapping.interest_rate else None
            minimum = (
                _optional_float(row.get(mapping.minimum_payment))
                if mapping.minimum_payment
                else None
            )
        except ValueError:
            logger.warning("Skipping CSV row with malformed numbers", extra={"row": index})
            continue

        debt_id = str(row.get(mapping.id) or "").strip() if mapping.id else ""
        name = str(row.get(mapping.name) or "").strip()
        category = str(row.get(mapping.category) or "").strip() if mapping.category else ""

        debts.append(
            DebtAccount(
                id=debt_id or str(index),
                name=name or f"Debt {index}",
                category=category,
                balance=balance,
                interest_rate=rate,
                minimum_payment=minimum,
            )
        )
    return debts


def load_debts_csv(csv_path: Path, *, mapping: ColumnMapping | None = None) -> list[DebtAccount]:
    """Parse a debts CSV file into payoff inputs."""

    frame = normalize_frame(file_path=csv_path)
    rows = frame.to_dict(orient="records")
    debts = parse_debt_rows(rows=rows, mapping=mapping or ColumnMapping())
    logger.info("Loaded debts from CSV", extra={"path": str(csv_path), "count": len(debts)})
    return debts


def to_liabilities(debts: Iterable[DebtAccount], *, user_id: int) -> list[Liability]:
    """Build unsaved liability rows for persisting imported debts."""

    return [
        Liability(
            user_id=user_id,
            name=debt.name,
            category=debt.category or "other",
            original_amount=debt.balance,
            current_balance=debt.balance,
            interest_rate=debt.interest_rate,
            minimum_payment=debt.minimum_payment,
        )
        for debt in debts
    ]
