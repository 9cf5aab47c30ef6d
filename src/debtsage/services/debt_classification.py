"""Good/bad debt classification.

Good debt is debt that pays for itself (a rental mortgage, a loan that
financed income-producing equipment); bad debt only costs money every month.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ..models.liability import Liability


@dataclass(slots=True)
class ClassifiedDebt:
    id: str
    name: str
    category: str
    current_balance: float
    interest_rate: float | None
    minimum_payment: float | None
    debt_type: str
    generates_income: bool
    monthly_income_generated: float
    net_cost: float  # monthly payment minus income generated
    roi: float  # percent, good debt only


@dataclass(slots=True)
class DebtClassification:
    good_debt: list[ClassifiedDebt] = field(default_factory=list)
    bad_debt: list[ClassifiedDebt] = field(default_factory=list)
    total_good_debt: float = 0.0
    total_bad_debt: float = 0.0
    total_debt: float = 0.0
    good_debt_ratio: float = 0.0
    total_monthly_from_good_debt: float = 0.0
    net_monthly_cost_bad_debt: float = 0.0
    recommendations: list[str] = field(default_factory=list)


def _classify(liability: Liability) -> ClassifiedDebt:
    payment = liability.minimum_payment or 0.0
    income = liability.monthly_income_generated or 0.0
    is_good = liability.debt_type == "good" or bool(liability.generates_income)

    roi = 0.0
    if is_good and payment > 0:
        roi = (income - payment) / payment * 100

    return ClassifiedDebt(
        id=str(liability.id),
        name=liability.name,
        category=liability.category or "",
        current_balance=float(liability.current_balance or 0.0),
        interest_rate=liability.interest_rate,
        minimum_payment=liability.minimum_payment,
        debt_type="good" if is_good else "bad",
        generates_income=bool(liability.generates_income),
        monthly_income_generated=income,
        net_cost=payment - income,
        roi=roi,
    )


def classify_debts(liabilities: Iterable[Liability]) -> DebtClassification:
    """Split liabilities into good and bad debt and suggest next steps."""

    classified = [_classify(liability) for liability in liabilities]
    if not classified:
        return DebtClassification(
            recommendations=[
                "You have no debts registered. Excellent position!",
                "If you do have debts, add them to classify them as good or bad.",
            ]
        )

    good = [d for d in classified if d.debt_type == "good"]
    bad = [d for d in classified if d.debt_type == "bad"]

    total_good = sum(d.current_balance for d in good)
    total_bad = sum(d.current_balance for d in bad)
    total = total_good + total_bad
    ratio = total_good / total * 100 if total > 0 else 0.0
    income_from_good = sum(d.monthly_income_generated for d in good)
    bad_monthly_cost = sum(d.minimum_payment or 0.0 for d in bad)

    recommendations: list[str] = []
    if total_bad > total_good:
        recommendations.append("Bad debt makes you poorer, good debt makes you richer.")
        recommendations.append("Pay down bad debt before taking on any new debt.")
    if bad:
        worst = max(bad, key=lambda d: d.interest_rate or 0.0)
        recommendations.append(
            f'Pay "{worst.name}" first ({worst.interest_rate or 0:g}% interest).'
        )
    if good and income_from_good > 0:
        recommendations.append(f"Your good debt generates ${income_from_good:.0f}/month in income.")
    if ratio < 50 and total > 0:
        recommendations.append("Goal: move your debt structure to more than 50% good debt.")
    if bad_monthly_cost > 0:
        recommendations.append(
            f"You are paying ${bad_monthly_cost:.0f}/month on debt that generates no income."
        )

    return DebtClassification(
        good_debt=good,
        bad_debt=bad,
        total_good_debt=total_good,
        total_bad_debt=total_bad,
        total_debt=total,
        good_debt_ratio=ratio,
        total_monthly_from_good_debt=income_from_good,
        net_monthly_cost_bad_debt=bad_monthly_cost,
        recommendations=recommendations,
    )
