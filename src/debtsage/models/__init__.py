"""Database models for DebtSage."""

from .liability import Liability

__all__ = ["Liability"]
