"""Liability repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.liability import Liability


class LiabilityRepository(Protocol):
    """Source of the stored debts fed to the payoff planner."""

    def get_by_name(self, name: str, *, user_id: int) -> Optional[Liability]:
        ...

    def list_all(self, *, user_id: int) -> list[Liability]:
        ...

    def create(self, liability: Liability, *, user_id: int) -> Liability:
        ...
