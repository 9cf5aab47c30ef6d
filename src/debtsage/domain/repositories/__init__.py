"""Repository protocol definitions for domain layer."""

from .liability import LiabilityRepository

__all__ = ["LiabilityRepository"]
