"""SQLModel implementation of Liability repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.liability import Liability


class SQLModelLiabilityRepository:
    """Stores the debts a user plans against, scoped by ``user_id``."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_by_name(self, name: str, *, user_id: int) -> Optional[Liability]:
        """Retrieve a liability by name."""
        with self.session_factory() as session:
            statement = select(Liability).where(
                Liability.name == name, Liability.user_id == user_id
            )
            return session.exec(statement).first()

    def list_all(self, *, user_id: int) -> list[Liability]:
        """List the user's liabilities, alphabetically."""
        with self.session_factory() as session:
            statement = (
                select(Liability)
                .where(Liability.user_id == user_id)
                .order_by(Liability.name)  # type: ignore
            )
            return list(session.exec(statement).all())

    def create(self, liability: Liability, *, user_id: int) -> Liability:
        """Persist a new liability; the opening balance doubles as original amount."""
        with self.session_factory() as session:
            liability.user_id = user_id
            if not liability.original_amount:
                liability.original_amount = liability.current_balance
            session.add(liability)
            session.commit()
            session.refresh(liability)
            return liability
