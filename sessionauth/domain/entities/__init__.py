"""Export the domain entities for use across the application."""

from .user import User

__all__ = ["User"]
