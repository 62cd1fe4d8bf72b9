from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sessionauth.domain.entities.user import User


class UserOut(BaseModel):
    """Public view of a user. Never includes hashes or provider tokens."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    has_password: bool
    oauth_provider: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            email=user.email,
            has_password=user.has_password,
            oauth_provider=user.oauth_provider,
            created_at=user.created_at,
        )


class HomeResponse(BaseModel):
    """What the landing page needs: the current user and pending flash messages."""

    user: Optional[UserOut] = None
    errors: List[str] = Field(default_factory=list)
    info: List[str] = Field(default_factory=list)
