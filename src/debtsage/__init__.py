"""DebtSage debt payoff planning package."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .services.debt_manager import build_debt_manager
from .services.debts import DebtAccount

__all__ = ["BaseConfig", "DebtAccount", "DevConfig", "build_debt_manager"]
