"""Form payloads for the authentication routes.

Fields default to empty strings so that a missing field reaches the auth gate
(and produces a flash message) instead of failing FastAPI validation.
"""

from pydantic import BaseModel, Field


class CredentialsForm(BaseModel):
    """Email/password form used by ``/login`` and ``/register``."""

    email: str = Field(default="", max_length=320)
    password: str = Field(default="", max_length=1024)


class ProfileForm(BaseModel):
    """Profile update form; blank fields are left unchanged."""

    email: str = Field(default="", max_length=320)
    password: str = Field(default="", max_length=1024)
