"""CSV export helpers for payoff plans."""

from __future__ import annotations

import csv
from datetime import date
from pathlib import Path

from .debt_manager import DebtManagerData, DebtStrategy


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


PLAN_HEADERS = [
    "strategy",
    "completion_rank",
    "payoff_order",
    "id",
    "name",
    "category",
    "balance",
    "interest_rate",
    "minimum_payment",
    "months_to_payoff",
    "total_interest_paid",
    "payoff_date",
    "paid_off",
]


def export_payoff_plan_csv(*, data: DebtManagerData, output_path: Path) -> Path:
    """Write one row per strategy and debt to ``output_path``.

    Rows follow completion order within each strategy. Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=PLAN_HEADERS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for strategy in (data.avalanche_strategy, data.snowball_strategy):
            if strategy is None:
                continue
            for rank, item in enumerate(strategy.payoff_order, start=1):
                row = {
                    "strategy": strategy.name,
                    "completion_rank": rank,
                    "payoff_order": item.payoff_order,
                    "id": item.id,
                    "name": item.name,
                    "category": item.category,
                    "balance": item.balance,
                    "interest_rate": item.interest_rate,
                    "minimum_payment": item.minimum_payment,
                    "months_to_payoff": item.months_to_payoff,
                    "total_interest_paid": item.total_interest_paid,
                    "payoff_date": item.payoff_date,
                    "paid_off": item.paid_off,
                }
                writer.writerow({key: _serialize_value(value) for key, value in row.items()})

    return output_path


def export_timeline_csv(*, strategy: DebtStrategy, output_path: Path) -> Path:
    """Write the month-by-month remaining balance of every debt.

    Columns: month, date, budget, one balance column per debt id in payoff
    order, then total_balance.
    """

    debt_ids = [item.id for item in strategy.payoff_order]
    headers = ["month", "date", "budget", *debt_ids, "total_balance"]
    output_path.parent.mkdir(parents=True, exist_ok=True)

    last_balance = {item.id: item.balance for item in strategy.payoff_order}
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(headers)
        for snapshot in strategy.timeline:
            for debt_id, payment in snapshot.payments.items():
                last_balance[debt_id] = payment["remaining_balance"]
            writer.writerow(
                [
                    snapshot.month,
                    _serialize_value(snapshot.date),
                    _serialize_value(snapshot.budget),
                    *(_serialize_value(float(last_balance[debt_id])) for debt_id in debt_ids),
                    _serialize_value(snapshot.total_balance),
                ]
            )

    return output_path
