"""Concrete repository implementations using SQLModel."""

from .liability import SQLModelLiabilityRepository

__all__ = ["SQLModelLiabilityRepository"]
