"""Strategy comparison built on top of the payoff simulator.

``build_debt_manager`` is the entry point used by the CLI and any other
caller: it computes portfolio metrics straight from the input debts, runs
the avalanche and snowball simulations on independent working copies and
recommends one of the two.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Iterable, Optional

from ..logging_config import get_logger
from ..utils import add_months
from .debts import (
    MONTH_CAP,
    DebtAccount,
    MonthSnapshot,
    WorkingDebt,
    normalize_debts,
    simulate_payoff,
    sort_debts,
)

logger = get_logger(__name__)

# Interest difference (currency units) above which avalanche is recommended.
SAVINGS_THRESHOLD = 100.0

STRATEGY_DESCRIPTIONS = {
    "avalanche": "Pay the highest interest rate debts first to minimize total interest paid.",
    "snowball": "Pay the smallest balances first to get quick wins and keep motivation up.",
}


@dataclass(slots=True)
class DebtPayoffItem:
    """Payoff outcome for one debt under one strategy."""

    id: str
    name: str
    category: str
    balance: float  # original balance
    interest_rate: float
    minimum_payment: float
    months_to_payoff: int
    total_interest_paid: float
    payoff_date: Optional[date]
    payoff_order: int  # rank assigned by the strategy sort
    paid_off: bool = True


@dataclass(slots=True)
class DebtStrategy:
    name: str
    description: str
    total_months: int
    total_interest_paid: float
    debt_free_date: date
    payoff_order: list[DebtPayoffItem] = field(default_factory=list)
    # Not computed yet; kept so consumers can rely on the field.
    monthly_savings_vs_minimum: float = 0.0
    converged: bool = True
    timeline: list[MonthSnapshot] = field(default_factory=list)


@dataclass(slots=True)
class PortfolioMetrics:
    total_debt: float = 0.0
    total_minimum_payments: float = 0.0
    average_interest_rate: float = 0.0
    highest_interest_rate: float = 0.0
    lowest_balance: float = 0.0
    debts_count: int = 0


@dataclass(slots=True)
class DebtManagerData:
    """Everything the dashboard needs to render the debt manager."""

    total_debt: float
    total_minimum_payments: float
    average_interest_rate: float
    highest_interest_rate: float
    lowest_balance: float
    debts_count: int
    avalanche_strategy: Optional[DebtStrategy]
    snowball_strategy: Optional[DebtStrategy]
    recommended_strategy: str
    potential_savings: float
    extra_payment: float = 0.0
    start_date: Optional[date] = None

    def strategy(self, name: str) -> Optional[DebtStrategy]:
        if name == "avalanche":
            return self.avalanche_strategy
        if name == "snowball":
            return self.snowball_strategy
        raise ValueError(f"Invalid debt payoff strategy: {name!r}")

    def to_dict(self, *, include_timeline: bool = False) -> dict[str, Any]:
        """Return a JSON-friendly representation (dates as ISO strings)."""

        data = asdict(self)
        for key in ("avalanche_strategy", "snowball_strategy"):
            strategy = data[key]
            if strategy is None:
                continue
            if not include_timeline:
                strategy.pop("timeline", None)
        return _jsonable(data)


def _jsonable(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    return value


def _payoff_item(debt: WorkingDebt, start_date: date) -> DebtPayoffItem:
    return DebtPayoffItem(
        id=debt.id,
        name=debt.name,
        category=debt.category,
        balance=debt.original_balance,
        interest_rate=debt.interest_rate,
        minimum_payment=debt.minimum_payment,
        months_to_payoff=debt.payoff_month,
        total_interest_paid=debt.total_interest_paid,
        payoff_date=add_months(start_date, debt.payoff_month) if debt.paid_off else None,
        payoff_order=debt.sort_rank,
        paid_off=debt.paid_off,
    )


def build_strategy(
    debts: Iterable[WorkingDebt],
    strategy: str,
    *,
    extra_payment: float = 0.0,
    start_date: date,
    month_cap: int = MONTH_CAP,
) -> DebtStrategy:
    """Sort, simulate and summarize ``debts`` for one strategy.

    ``payoff_order`` lists debts by the month they were cleared (ties keep
    the strategy order); debts still open at the month cap come last.
    """

    ordered = sort_debts(debts, strategy)
    result = simulate_payoff(
        ordered, extra_payment=extra_payment, start_date=start_date, month_cap=month_cap
    )

    items = [_payoff_item(debt, start_date) for debt in result.debts]
    items.sort(key=lambda item: (not item.paid_off, item.months_to_payoff))

    logger.debug(
        "Simulated %s strategy",
        strategy,
        extra={
            "months": result.total_months,
            "total_interest": round(result.total_interest, 2),
            "converged": result.converged,
        },
    )

    return DebtStrategy(
        name=strategy,
        description=STRATEGY_DESCRIPTIONS[strategy],
        total_months=result.total_months,
        total_interest_paid=result.total_interest,
        debt_free_date=add_months(start_date, result.total_months),
        payoff_order=items,
        converged=result.converged,
        timeline=result.timeline,
    )


def portfolio_metrics(debts: Iterable[DebtAccount]) -> PortfolioMetrics:
    """Aggregate statistics over the raw debts, independent of any strategy."""

    return _metrics(normalize_debts(debts))


def _metrics(normalized: list[WorkingDebt]) -> PortfolioMetrics:
    if not normalized:
        return PortfolioMetrics()

    positive_rates = [d.interest_rate for d in normalized if d.interest_rate > 0]
    return PortfolioMetrics(
        total_debt=sum(d.balance for d in normalized),
        total_minimum_payments=sum(d.minimum_payment for d in normalized),
        average_interest_rate=(
            sum(positive_rates) / len(positive_rates) if positive_rates else 0.0
        ),
        highest_interest_rate=max(d.interest_rate for d in normalized),
        lowest_balance=min(d.balance for d in normalized),
        debts_count=len(normalized),
    )


def recommend_strategy(avalanche: DebtStrategy, snowball: DebtStrategy) -> tuple[str, float]:
    """Return (recommended strategy, potential savings of avalanche over snowball).

    Below the savings threshold the quick wins of snowball are preferred.
    """

    potential_savings = snowball.total_interest_paid - avalanche.total_interest_paid
    recommended = "avalanche" if potential_savings > SAVINGS_THRESHOLD else "snowball"
    return recommended, potential_savings


def build_debt_manager(
    debts: Iterable[DebtAccount],
    extra_payment: float = 0.0,
    *,
    start_date: date | None = None,
) -> DebtManagerData:
    """Compute metrics, both payoff strategies and a recommendation."""

    debts = list(debts)
    start = start_date or date.today()
    extra = max(float(extra_payment or 0.0), 0.0)

    if not debts:
        return DebtManagerData(
            total_debt=0.0,
            total_minimum_payments=0.0,
            average_interest_rate=0.0,
            highest_interest_rate=0.0,
            lowest_balance=0.0,
            debts_count=0,
            avalanche_strategy=None,
            snowball_strategy=None,
            recommended_strategy="avalanche",
            potential_savings=0.0,
            extra_payment=extra,
            start_date=start,
        )

    normalized = normalize_debts(debts)
    metrics = _metrics(normalized)
    avalanche = build_strategy(normalized, "avalanche", extra_payment=extra, start_date=start)
    snowball = build_strategy(normalized, "snowball", extra_payment=extra, start_date=start)
    recommended, potential_savings = recommend_strategy(avalanche, snowball)

    logger.info(
        "Built debt plan",
        extra={
            "debts": metrics.debts_count,
            "extra_payment": extra,
            "recommended": recommended,
            "potential_savings": round(potential_savings, 2),
        },
    )

    return DebtManagerData(
        total_debt=metrics.total_debt,
        total_minimum_payments=metrics.total_minimum_payments,
        average_interest_rate=metrics.average_interest_rate,
        highest_interest_rate=metrics.highest_interest_rate,
        lowest_balance=metrics.lowest_balance,
        debts_count=metrics.debts_count,
        avalanche_strategy=avalanche,
        snowball_strategy=snowball,
        recommended_strategy=recommended,
        potential_savings=potential_savings,
        extra_payment=extra,
        start_date=start,
    )


__all__ = [
    "SAVINGS_THRESHOLD",
    "DebtManagerData",
    "DebtPayoffItem",
    "DebtStrategy",
    "PortfolioMetrics",
    "build_debt_manager",
    "build_strategy",
    "portfolio_metrics",
    "recommend_strategy",
]
