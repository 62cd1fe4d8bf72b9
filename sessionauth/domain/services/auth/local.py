from starlette.concurrency import run_in_threadpool
from structlog import get_logger

from sessionauth.core.exceptions import StoreUnavailableError
from sessionauth.domain.interfaces.repositories import IUserRepository
from sessionauth.domain.services.auth.credentials import CredentialVerifier
from sessionauth.domain.value_objects.auth_outcome import (
    INVALID_CREDENTIALS,
    STORE_UNAVAILABLE,
    AuthOutcome,
    Authenticated,
)
from sessionauth.domain.value_objects.email import Email, mask_email

logger = get_logger(__name__)


class LocalStrategy:
    """
    Email/password authentication against the user store.

    Unknown emails, malformed emails, wrong passwords and password-less
    (OAuth-provisioned) accounts all produce the same ``INVALID_CREDENTIALS``
    rejection so that the response never reveals whether an email is
    registered. Hash verification runs in the thread pool to keep bcrypt off
    the event loop.

    Attributes:
        user_repository (IUserRepository): User store.
        verifier (CredentialVerifier): Password hash verifier.
    """

    def __init__(self, user_repository: IUserRepository, verifier: CredentialVerifier):
        self.user_repository = user_repository
        self.verifier = verifier

    async def authenticate(self, email: str, password: str) -> AuthOutcome:
        """
        Authenticate a user using email and password.

        Args:
            email (str): Email as typed by the user; normalized before lookup.
            password (str): Plaintext password.

        Returns:
            AuthOutcome: ``Authenticated(user)`` or ``INVALID_CREDENTIALS``;
            ``STORE_UNAVAILABLE`` if the store failed.
        """
        try:
            normalized = Email(email)
        except (TypeError, ValueError):
            await run_in_threadpool(self.verifier.dummy_verify)
            logger.info("Local login rejected", email=mask_email(email), cause="malformed_email")
            return INVALID_CREDENTIALS

        try:
            user = await self.user_repository.get_by_email(normalized.value)
        except StoreUnavailableError:
            logger.error("Local login failed, user store unavailable", email=normalized.mask_for_logging())
            return STORE_UNAVAILABLE

        if user is None:
            await run_in_threadpool(self.verifier.dummy_verify)
            logger.info("Local login rejected", email=normalized.mask_for_logging(), cause="unknown_email")
            return INVALID_CREDENTIALS

        if not await run_in_threadpool(self.verifier.verify, password, user.hashed_password):
            logger.info("Local login rejected", email=normalized.mask_for_logging(), cause="bad_password")
            return INVALID_CREDENTIALS

        logger.info("Local login succeeded", user_id=user.id)
        return Authenticated(user)
