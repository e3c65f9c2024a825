"""User directory package."""

from .repository import InMemoryUserDirectory, UserDirectory

__all__ = ["InMemoryUserDirectory", "UserDirectory"]
