"""Orchestration of the authentication strategies.

``AuthGate`` is the single entry point used by the HTTP routes. It picks the
strategy, stores the identity on success and turns every failure into a
uniform ``GateResult`` carrying a translated, generic flash message and the
taxonomy error behind it. Nothing raised below the gate (store errors, driver
errors) reaches the end user.
"""

from dataclasses import dataclass
from typing import Optional

from starlette.concurrency import run_in_threadpool
from structlog import get_logger

from sessionauth.core.exceptions import (
    AuthenticationError,
    DuplicateEmailError,
    ProviderError,
    SessionAuthError,
    StoreUnavailableError,
    UserNotFoundError,
    ValidationError,
)
from sessionauth.domain.entities.user import User
from sessionauth.domain.interfaces.repositories import IUserRepository
from sessionauth.domain.services.auth.credentials import CredentialVerifier
from sessionauth.domain.services.auth.local import LocalStrategy
from sessionauth.domain.services.auth.oauth import OAuthStrategy
from sessionauth.domain.services.auth.session import SessionCodec, SessionData
from sessionauth.domain.value_objects.auth_outcome import Authenticated
from sessionauth.domain.value_objects.email import Email, mask_email
from sessionauth.domain.value_objects.oauth_profile import OAuthProfile
from sessionauth.utils.i18n import get_translated_message

logger = get_logger(__name__)

HOME = "/"


@dataclass(frozen=True)
class Flash:
    """A one-shot message for the next page view."""

    category: str  # "error" or "info"
    message: str


@dataclass(frozen=True)
class GateResult:
    """Outcome of one gate operation.

    ``error`` is the taxonomy exception behind a failure; its ``code`` is
    logged by the routes and never shown to the user.
    """

    success: bool
    redirect_to: str = HOME
    flash: Optional[Flash] = None
    user: Optional[User] = None
    error: Optional[SessionAuthError] = None

    @property
    def error_code(self) -> Optional[str]:
        return self.error.code if self.error is not None else None


class AuthGate:
    """
    Entry point for login, registration, OAuth callbacks, logout, profile
    updates and the per-request user guard.

    The gate and its collaborators are built once at startup and shared by
    all requests; they hold no per-request state.

    Attributes:
        user_repository (IUserRepository): User store.
        verifier (CredentialVerifier): Password hasher/verifier.
        local_strategy (LocalStrategy): Email/password strategy.
        oauth_strategy (OAuthStrategy): OAuth identity-resolution strategy.
        session_codec (SessionCodec): Session identity reader/writer.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        verifier: CredentialVerifier,
        local_strategy: LocalStrategy,
        oauth_strategy: OAuthStrategy,
        session_codec: SessionCodec,
    ):
        self.user_repository = user_repository
        self.verifier = verifier
        self.local_strategy = local_strategy
        self.oauth_strategy = oauth_strategy
        self.session_codec = session_codec

    async def handle_login(
        self, email: str, password: str, session: SessionData, language: str = "en"
    ) -> GateResult:
        """Authenticate with the local strategy and sign the session in."""
        outcome = await self.local_strategy.authenticate(email or "", password or "")
        if isinstance(outcome, Authenticated):
            self.session_codec.store(session, outcome.user)
            return GateResult(success=True, user=outcome.user)
        return self._failure(outcome.message_key, language, outcome.to_error())

    async def handle_register(self, email: str, password: str, language: str = "en") -> GateResult:
        """
        Create a local account. Does not sign the new user in.

        Returns:
            GateResult: info flash on success; error flash for missing fields,
            a malformed email, an existing account or a store failure.
        """
        try:
            normalized = self._validate_registration(email, password)
        except ValidationError as e:
            return self._failure(e.code, language, e)

        hashed_password = await run_in_threadpool(self.verifier.hash, password)
        try:
            user = await self.user_repository.create(normalized.value, hashed_password=hashed_password)
        except DuplicateEmailError as e:
            logger.info("Registration for existing email", email=normalized.mask_for_logging())
            return self._failure("account_already_exists", language, e)
        except StoreUnavailableError as e:
            logger.error("Registration failed, user store unavailable")
            return self._failure("service_temporarily_unavailable", language, e)

        logger.info("New user registered", user_id=user.id, email=normalized.mask_for_logging())
        return GateResult(
            success=True,
            flash=Flash("info", get_translated_message("account_successfully_created", language)),
            user=user,
        )

    async def handle_oauth_callback(
        self, profile: OAuthProfile, session: SessionData, language: str = "en"
    ) -> GateResult:
        """Authenticate with the OAuth strategy and sign the session in.

        A user already signed in to this session is passed to the strategy as
        the explicit linking target.
        """
        try:
            current_user = await self.require_user(session)
        except StoreUnavailableError as e:
            return self._failure("service_temporarily_unavailable", language, e)

        outcome = await self.oauth_strategy.authenticate(profile, link_to=current_user)
        if isinstance(outcome, Authenticated):
            self.session_codec.store(session, outcome.user)
            return GateResult(success=True, user=outcome.user)
        return self._failure(outcome.message_key, language, outcome.to_error())

    def handle_oauth_failure(
        self, language: str = "en", error: Optional[ProviderError] = None
    ) -> GateResult:
        """Result for a handshake that failed before a profile was obtained."""
        return self._failure("oauth_login_failed", language, error or ProviderError())

    def handle_logout(self, session: SessionData) -> GateResult:
        self.session_codec.clear(session)
        return GateResult(success=True)

    async def require_user(self, session: SessionData) -> Optional[User]:
        """
        Resolve the signed-in user, or ``None`` for an anonymous caller.

        A session whose identity no longer resolves loses that identity; other
        session state (pending flash messages) is kept.

        Raises:
            StoreUnavailableError: If the store could not be queried.
        """
        had_identity = self.session_codec.has_identity(session)
        user = await self.session_codec.resolve(session)
        if user is None and had_identity:
            self.session_codec.forget(session)
        return user

    async def handle_profile_update(
        self,
        session: SessionData,
        email: Optional[str] = None,
        password: Optional[str] = None,
        language: str = "en",
    ) -> GateResult:
        """
        Update the signed-in user's email and/or password.

        Blank fields are left unchanged; at least one must be provided.
        """
        try:
            user = await self.require_user(session)
        except StoreUnavailableError as e:
            return self._failure("service_temporarily_unavailable", language, e)
        if user is None:
            return self._failure(
                "login_required",
                language,
                AuthenticationError("Authentication required", code="login_required"),
            )

        try:
            fields = self._profile_fields(email, password)
        except ValidationError as e:
            return self._failure(e.code, language, e)
        if "hashed_password" in fields:
            fields["hashed_password"] = await run_in_threadpool(self.verifier.hash, password)

        try:
            updated = await self.user_repository.update(user.id, **fields)
        except DuplicateEmailError as e:
            logger.info("Profile update to an existing email", user_id=user.id, email=mask_email(email or ""))
            return self._failure("account_already_exists", language, e)
        except UserNotFoundError as e:
            self.session_codec.forget(session)
            return self._failure("login_required", language, e)
        except StoreUnavailableError as e:
            logger.error("Profile update failed, user store unavailable", user_id=user.id)
            return self._failure("service_temporarily_unavailable", language, e)

        logger.info("Profile updated", user_id=user.id, fields=sorted(fields))
        return GateResult(
            success=True,
            flash=Flash("info", get_translated_message("profile_updated", language)),
            user=updated,
        )

    @staticmethod
    def _validate_registration(email: Optional[str], password: Optional[str]) -> Email:
        """
        Raises:
            ValidationError: With the i18n key of the problem as ``code``.
        """
        if not email or not email.strip() or not password:
            raise ValidationError("Email and password are required", code="email_and_password_required")
        try:
            return Email(email)
        except (TypeError, ValueError) as e:
            raise ValidationError("Malformed email address", code="invalid_email_format") from e

    @staticmethod
    def _profile_fields(email: Optional[str], password: Optional[str]) -> dict:
        """Columns to update; the password is still plaintext here."""
        fields = {}
        if email and email.strip():
            try:
                fields["email"] = Email(email).value
            except (TypeError, ValueError) as e:
                raise ValidationError("Malformed email address", code="invalid_email_format") from e
        if password:
            fields["hashed_password"] = password
        if not fields:
            raise ValidationError("No profile field provided", code="profile_update_fields_required")
        return fields

    def _failure(self, message_key: str, language: str, error: SessionAuthError) -> GateResult:
        return GateResult(
            success=False,
            flash=Flash("error", get_translated_message(message_key, language)),
            error=error,
        )
