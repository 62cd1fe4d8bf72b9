"""Repository implementations for the infrastructure layer."""

from .user_repository import UserRepository
from sessionauth.domain.interfaces.repositories import IUserRepository

__all__ = ["UserRepository", "IUserRepository"]
