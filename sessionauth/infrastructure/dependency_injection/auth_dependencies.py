"""Construction and injection of the authentication components.

The component graph (repository → verifier → strategies → codec → gate) is
built once at startup by ``build_auth_gate`` and stored on ``app.state``.
Routes receive it through the ``get_auth_gate`` FastAPI dependency, which
tests override or replace by setting ``app.state.auth_gate`` directly.
"""

from typing import Annotated, Optional

from cryptography.fernet import Fernet
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from sessionauth.core.config.settings import Settings, settings as default_settings
from sessionauth.domain.interfaces.oauth import IOAuthClient
from sessionauth.domain.services.auth import (
    AuthGate,
    CredentialVerifier,
    LocalStrategy,
    OAuthStrategy,
    SessionCodec,
)
from sessionauth.infrastructure.repositories import UserRepository

logger = get_logger(__name__)


def build_fernet(settings: Settings = default_settings) -> Fernet:
    """Return the cipher for provider tokens at rest.

    Outside development and test a key is mandatory (enforced at settings
    validation). Locally a throwaway key is generated, which makes stored
    tokens unreadable after a restart.
    """
    key = settings.TOKEN_ENCRYPTION_KEY.get_secret_value()
    if key:
        return Fernet(key.encode())
    logger.warning(
        "TOKEN_ENCRYPTION_KEY not set, generating an ephemeral key",
        environment=settings.APP_ENV,
    )
    return Fernet(Fernet.generate_key())


def build_auth_gate(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings = default_settings,
    fernet: Optional[Fernet] = None,
) -> AuthGate:
    """Wire the authentication components around one user repository."""
    user_repository = UserRepository(session_factory)
    verifier = CredentialVerifier(work_factor=settings.BCRYPT_WORK_FACTOR)
    return AuthGate(
        user_repository=user_repository,
        verifier=verifier,
        local_strategy=LocalStrategy(user_repository, verifier),
        oauth_strategy=OAuthStrategy(user_repository, fernet or build_fernet(settings)),
        session_codec=SessionCodec(user_repository),
    )


def get_auth_gate(request: Request) -> AuthGate:  # noqa: D401
    """FastAPI dependency returning the process-wide :class:`AuthGate`."""
    return request.app.state.auth_gate


def get_oauth_client(request: Request) -> Optional[IOAuthClient]:  # noqa: D401
    """FastAPI dependency returning the configured OAuth client, if any."""
    return getattr(request.app.state, "oauth_client", None)


AuthGateDep = Annotated[AuthGate, Depends(get_auth_gate)]
OAuthClientDep = Annotated[Optional[IOAuthClient], Depends(get_oauth_client)]
