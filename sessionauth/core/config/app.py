"""
Application-specific settings.
"""
from typing import List, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Defines application-wide settings like project name, debug mode, and CORS origins.

    Security Note:
        - SECRET_KEY signs the session cookie. It must be a cryptographically
          secure random string (minimum 32 characters); anyone holding it can
          forge a session for any user.
        - Ensure ALLOWED_ORIGINS is explicitly set to trusted domains in production.
    """
    PROJECT_NAME: str = "sessionauth"
    VERSION: str = "0.1.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8080

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    SECRET_KEY: str = Field(..., min_length=32)
    ALLOWED_ORIGINS: Union[str, List[str]] = Field(default="http://localhost:8080", validate_default=True)
    DEFAULT_LANGUAGE: str = "en"
    SUPPORTED_LANGUAGES: Union[str, List[str]] = Field(default="en,es", validate_default=True)

    @field_validator("ALLOWED_ORIGINS", "SUPPORTED_LANGUAGES", mode="before")
    @classmethod
    def split_comma_separated(cls, v: Union[str, List[str]]) -> List[str]:
        """
        Splits a comma-separated string into a list.

        Args:
            v: Input value as a string or list.

        Returns:
            List of stripped strings.
        """
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v
