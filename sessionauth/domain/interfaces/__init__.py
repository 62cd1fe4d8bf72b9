"""Domain ports implemented by the infrastructure layer."""

from .oauth import IOAuthClient
from .repositories import IUserRepository, OAuthLinkage

__all__ = ["IOAuthClient", "IUserRepository", "OAuthLinkage"]
