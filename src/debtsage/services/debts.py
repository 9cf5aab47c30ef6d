"""Debt payoff simulation (snowball and avalanche)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import TYPE_CHECKING, Any, Callable, Iterable

from ..logging_config import get_logger
from ..utils import add_months

if TYPE_CHECKING:
    from ..models.liability import Liability

logger = get_logger(__name__)

MONTH_CAP = 360  # 30 years
MIN_PAYMENT_RATE = 0.02
MIN_PAYMENT_FLOOR = 25.0
# Residual balances below half a cent count as paid off.
PAYOFF_EPSILON = 0.005

STRATEGIES = ("avalanche", "snowball")


@dataclass(slots=True)
class DebtAccount:
    """Represents a liability input for payoff projections."""

    id: str
    name: str
    balance: float
    interest_rate: float | None = None
    minimum_payment: float | None = None
    category: str = ""

    @classmethod
    def from_liability(cls, liability: "Liability") -> "DebtAccount":
        """Build a payoff input from a stored liability row."""
        return cls(
            id=str(liability.id),
            name=liability.name,
            category=liability.category or "",
            balance=float(liability.current_balance or 0.0),
            interest_rate=liability.interest_rate,
            minimum_payment=liability.minimum_payment,
        )


@dataclass(slots=True)
class WorkingDebt:
    """Mutable per-run simulation state for one debt."""

    id: str
    name: str
    category: str
    balance: float
    interest_rate: float
    minimum_payment: float
    original_balance: float
    paid_off: bool = False
    payoff_month: int = 0
    total_interest_paid: float = 0.0
    sort_rank: int = 0


@dataclass(slots=True)
class MonthSnapshot:
    """Balances and payments for one simulated month."""

    month: int
    date: date
    budget: float
    payments: dict[str, dict[str, float]] = field(default_factory=dict)
    total_balance: float = 0.0


@dataclass(slots=True)
class SimulationResult:
    debts: list[WorkingDebt]
    total_months: int
    total_interest: float
    timeline: list[MonthSnapshot]
    converged: bool


def default_minimum_payment(balance: float) -> float:
    """Return 2% of the balance with a $25 floor."""
    return max(balance * MIN_PAYMENT_RATE, MIN_PAYMENT_FLOOR)


def _non_negative(value: float, *, debt_id: str, label: str) -> float:
    if value < 0:
        logger.warning(
            "Clamped negative %s to zero",
            label,
            extra={"debt_id": debt_id, "value": value},
        )
        return 0.0
    return value


def normalize_debts(debts: Iterable[DebtAccount]) -> list[WorkingDebt]:
    """Convert raw debt records into simulation-ready working debts.

    Missing (or non-positive) minimum payments fall back to
    :func:`default_minimum_payment`; a missing rate means an interest-free
    debt. Negative values are clamped to zero. A zero balance produces a
    debt that is already paid off.
    """

    normalized: list[WorkingDebt] = []
    for debt in debts:
        balance = _non_negative(float(debt.balance or 0.0), debt_id=debt.id, label="balance")
        rate = _non_negative(
            float(debt.interest_rate or 0.0), debt_id=debt.id, label="interest_rate"
        )
        minimum = _non_negative(
            float(debt.minimum_payment or 0.0), debt_id=debt.id, label="minimum_payment"
        )
        if minimum <= 0:
            minimum = default_minimum_payment(balance)

        normalized.append(
            WorkingDebt(
                id=debt.id,
                name=debt.name,
                category=debt.category,
                balance=balance,
                interest_rate=rate,
                minimum_payment=minimum,
                original_balance=balance,
                paid_off=balance <= 0,
            )
        )
    return normalized


STRATEGY_SORT_KEYS: dict[str, Callable[[WorkingDebt], Any]] = {
    # Highest rate first.
    "avalanche": lambda d: -d.interest_rate,
    # Lowest balance first.
    "snowball": lambda d: d.balance,
}


def sort_debts(debts: Iterable[WorkingDebt], strategy: str) -> list[WorkingDebt]:
    """Return fresh copies of ``debts`` ordered for ``strategy`` with ranks 1..N."""

    try:
        key = STRATEGY_SORT_KEYS[strategy]
    except KeyError:
        raise ValueError(f"Invalid debt payoff strategy: {strategy!r}") from None

    ordered = sorted(debts, key=key)  # stable: ties keep input order
    return [replace(debt, sort_rank=rank) for rank, debt in enumerate(ordered, start=1)]


def _settle(debt: WorkingDebt, month: int) -> None:
    if debt.balance <= PAYOFF_EPSILON:
        debt.balance = 0.0
        debt.paid_off = True
        debt.payoff_month = month


def simulate_payoff(
    debts: Iterable[WorkingDebt],
    *,
    extra_payment: float = 0.0,
    start_date: date,
    month_cap: int = MONTH_CAP,
) -> SimulationResult:
    """Run the month-by-month payoff loop for debts already in strategy order.

    The monthly budget is every debt's minimum payment plus
    ``extra_payment``. It stays fixed for the run, so the minimum of a debt
    that has been paid off keeps flowing into the pool that goes to the
    first unpaid debt in sort order. The loop stops when every debt is paid
    off or after ``month_cap`` months, whichever comes first.
    """

    working = [replace(debt) for debt in debts]
    extra = max(float(extra_payment or 0.0), 0.0)
    budget = sum(d.minimum_payment for d in working) + extra

    timeline: list[MonthSnapshot] = []
    total_interest = 0.0
    month = 0

    while any(not d.paid_off for d in working) and month < month_cap:
        month += 1
        available = budget
        snapshot = MonthSnapshot(month=month, date=add_months(start_date, month), budget=budget)

        for debt in working:
            if debt.paid_off:
                continue

            interest = debt.balance * (debt.interest_rate / 100) / 12
            debt.balance += interest
            debt.total_interest_paid += interest
            total_interest += interest

            payment = min(debt.minimum_payment, debt.balance)
            debt.balance -= payment
            available -= payment
            _settle(debt, month)

            snapshot.payments[debt.id] = {
                "interest": interest,
                "payment": payment,
                "remaining_balance": debt.balance,
            }

        # Whatever is left goes to a single target debt.
        target = next((d for d in working if not d.paid_off), None)
        if target is not None and available > 0:
            amount = min(available, target.balance)
            target.balance -= amount
            _settle(target, month)
            row = snapshot.payments[target.id]
            row["payment"] += amount
            row["remaining_balance"] = target.balance

        snapshot.total_balance = sum(d.balance for d in working)
        timeline.append(snapshot)

    converged = all(d.paid_off for d in working)
    if not converged:
        logger.warning(
            "Payoff simulation hit the month cap with unpaid debts",
            extra={
                "month_cap": month_cap,
                "unpaid": [d.id for d in working if not d.paid_off],
            },
        )

    return SimulationResult(
        debts=working,
        total_months=month,
        total_interest=total_interest,
        timeline=timeline,
        converged=converged,
    )


__all__ = [
    "MONTH_CAP",
    "STRATEGIES",
    "DebtAccount",
    "MonthSnapshot",
    "SimulationResult",
    "WorkingDebt",
    "default_minimum_payment",
    "normalize_debts",
    "simulate_payoff",
    "sort_debts",
]
