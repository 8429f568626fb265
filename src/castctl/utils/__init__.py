"""Utility helpers for castctl."""

from .persistence import PydanticPersistence

__all__ = ["PydanticPersistence"]
