"""Authentication and session settings.
"""

import logging

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class AuthSettings(BaseSettings):
    """Defines settings for the local and Google OAuth strategies and the session cookie.

    Security Note:
        - OAuth client secrets and TOKEN_ENCRYPTION_KEY should never be exposed
          in logs or version control.
        - TOKEN_ENCRYPTION_KEY is a urlsafe base64 Fernet key used to encrypt
          provider access/refresh tokens at rest. Rotating it makes previously
          stored tokens unreadable; users simply re-consent on next login.
        - SESSION_HTTPS_ONLY should be enabled wherever the app is served over TLS.
    """

    # Google OAuth2 client
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: SecretStr = SecretStr("")
    GOOGLE_REDIRECT_URI: str = ""
    GOOGLE_SCOPE: str = "openid email profile"

    # Provider token storage
    TOKEN_ENCRYPTION_KEY: SecretStr = SecretStr("")

    # Password hashing
    BCRYPT_WORK_FACTOR: int = Field(ge=4, le=31, default=12)

    # Signed cookie session
    SESSION_COOKIE_NAME: str = "session"
    SESSION_MAX_AGE_SECONDS: int = Field(ge=60, default=14 * 24 * 60 * 60)
    SESSION_HTTPS_ONLY: bool = False
    SESSION_SAME_SITE: str = Field(pattern="^(lax|strict|none)$", default="lax")

    @property
    def google_oauth_enabled(self) -> bool:
        """True when both halves of the Google client credentials are configured."""
        return bool(self.GOOGLE_CLIENT_ID and self.GOOGLE_CLIENT_SECRET.get_secret_value())
