"""Demo data seeding script."""

from __future__ import annotations

from debtsage.config import BaseConfig
from debtsage.infra.database import bootstrap_database
from debtsage.infra.repositories.liability import SQLModelLiabilityRepository
from debtsage.models.liability import Liability

DEMO_DEBTS = [
    dict(name="Credit Card", category="credit_card", current_balance=850.0,
         interest_rate=24.99, minimum_payment=35.0),
    dict(name="Store Card", category="credit_card", current_balance=420.0,
         interest_rate=29.9, minimum_payment=None),
    dict(name="Car Loan", category="auto", current_balance=9800.0,
         interest_rate=6.4, minimum_payment=310.0),
    dict(name="Student Loan", category="education", current_balance=18500.0,
         interest_rate=4.5, minimum_payment=190.0),
    dict(name="Rental Mortgage", category="mortgage", current_balance=142000.0,
         interest_rate=5.1, minimum_payment=980.0, debt_type="good",
         generates_income=True, monthly_income_generated=1350.0),
]


def seed_demo() -> None:
    """Populate the database with demo liabilities (skips names already present)."""

    config = BaseConfig()
    _, session_factory = bootstrap_database(config)
    repository = SQLModelLiabilityRepository(session_factory)

    created = 0
    for row in DEMO_DEBTS:
        if repository.get_by_name(row["name"], user_id=config.USER_ID) is not None:
            continue
        repository.create(Liability(**row), user_id=config.USER_ID)
        created += 1
    print(f"Seeded {created} demo debts.")


if __name__ == "__main__":
    seed_demo()
