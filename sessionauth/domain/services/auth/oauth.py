from typing import Optional

from cryptography.fernet import Fernet
from structlog import get_logger

from sessionauth.core.exceptions import DuplicateEmailError, StoreUnavailableError
from sessionauth.domain.entities.user import User
from sessionauth.domain.interfaces.repositories import IUserRepository, OAuthLinkage
from sessionauth.domain.value_objects.auth_outcome import (
    STORE_UNAVAILABLE,
    AuthOutcome,
    Authenticated,
    Rejected,
    RejectionReason,
)
from sessionauth.domain.value_objects.email import Email
from sessionauth.domain.value_objects.oauth_profile import OAuthProfile

logger = get_logger(__name__)

PROVIDER_REJECTED = Rejected(RejectionReason.PROVIDER_ERROR, "oauth_login_failed")
LINK_REQUIRED = Rejected(RejectionReason.ACCOUNT_LINK_REQUIRED, "oauth_account_link_required")


class OAuthStrategy:
    """
    Resolves or provisions a local user from a verified OAuth profile.

    Linkage policy:

    1. A user already linked to ``(provider, provider_user_id)`` is signed in
       and their stored tokens are refreshed.
    2. An unseen email provisions a new password-less user carrying the
       provider linkage.
    3. An existing password-less user with the same email is linked (or
       refreshed) and signed in, unless it is already linked to a different
       identity of the same provider.
    4. An existing *password* account with the same email is never merged
       implicitly. It is linked only when the caller is already signed in as
       that account (``link_to``); otherwise the attempt is rejected with
       ``ACCOUNT_LINK_REQUIRED`` and the account is left untouched.

    Provider tokens are encrypted with Fernet before they reach the store.

    Attributes:
        user_repository (IUserRepository): User store.
        fernet (Fernet): Cipher for provider tokens at rest.
    """

    def __init__(self, user_repository: IUserRepository, fernet: Fernet):
        self.user_repository = user_repository
        self.fernet = fernet

    async def authenticate(
        self, profile: OAuthProfile, link_to: Optional[User] = None
    ) -> AuthOutcome:
        """
        Authenticate a user from a provider profile.

        Args:
            profile (OAuthProfile): Profile returned by the OAuth handshake.
            link_to (Optional[User]): The user currently signed in to this
                session, if any. Signing in with a password first is the
                explicit confirmation required to link a password account.

        Returns:
            AuthOutcome: ``Authenticated(user)`` or a ``Rejected`` with reason
            ``PROVIDER_ERROR``, ``ACCOUNT_LINK_REQUIRED`` or ``STORE_UNAVAILABLE``.
        """
        email = profile.primary_email()
        if email is None or not profile.provider_user_id:
            logger.warning("OAuth profile rejected", provider=profile.provider, cause="missing_claims")
            return PROVIDER_REJECTED
        if not profile.email_verified:
            logger.warning(
                "OAuth profile rejected",
                provider=profile.provider,
                email=email.mask_for_logging(),
                cause="unverified_email",
            )
            return PROVIDER_REJECTED

        try:
            return await self._resolve(profile, email, self._linkage(profile), link_to)
        except StoreUnavailableError:
            logger.error("OAuth login failed, user store unavailable", provider=profile.provider)
            return STORE_UNAVAILABLE

    async def _resolve(
        self,
        profile: OAuthProfile,
        email: Email,
        linkage: OAuthLinkage,
        link_to: Optional[User],
    ) -> AuthOutcome:
        user = await self.user_repository.get_by_oauth_identity(
            profile.provider, profile.provider_user_id
        )
        if user is not None:
            return await self._refresh(user, linkage)

        user = await self.user_repository.get_by_email(email.value)
        if user is None:
            user = await self._provision(email, linkage)
            if user is None:
                return PROVIDER_REJECTED
            if user.is_linked_to(profile.provider, profile.provider_user_id):
                return Authenticated(user)

        return await self._sign_in_existing(user, profile, linkage, link_to)

    async def _provision(self, email: Email, linkage: OAuthLinkage) -> Optional[User]:
        try:
            await self.user_repository.create(email.value, hashed_password=None, oauth=linkage)
            logger.info(
                "Created new user from OAuth",
                provider=linkage.provider,
                email=email.mask_for_logging(),
            )
        except DuplicateEmailError:
            # Someone else provisioned this email (or identity) first; re-read.
            logger.info(
                "Concurrent OAuth provisioning, re-reading user",
                provider=linkage.provider,
                email=email.mask_for_logging(),
            )
            user = await self.user_repository.get_by_email(email.value)
            if user is None:
                user = await self.user_repository.get_by_oauth_identity(
                    linkage.provider, linkage.provider_user_id
                )
            if user is None:
                logger.error("OAuth provisioning conflict could not be resolved", provider=linkage.provider)
            return user

        return await self.user_repository.get_by_email(email.value)

    async def _sign_in_existing(
        self,
        user: User,
        profile: OAuthProfile,
        linkage: OAuthLinkage,
        link_to: Optional[User],
    ) -> AuthOutcome:
        if user.is_linked_to(profile.provider, profile.provider_user_id):
            return await self._refresh(user, linkage)

        if user.oauth_provider == profile.provider and user.oauth_provider_user_id:
            logger.warning(
                "OAuth email already linked to a different provider identity",
                provider=profile.provider,
                user_id=user.id,
            )
            return PROVIDER_REJECTED

        if user.has_password and (link_to is None or link_to.id != user.id):
            logger.info(
                "OAuth login requires explicit account linking",
                provider=profile.provider,
                user_id=user.id,
            )
            return LINK_REQUIRED

        linked = await self.user_repository.update(user.id, **linkage.as_fields())
        logger.info("Linked OAuth identity to user", provider=profile.provider, user_id=user.id)
        return Authenticated(linked)

    async def _refresh(self, user: User, linkage: OAuthLinkage) -> AuthOutcome:
        refreshed = await self.user_repository.update(user.id, **linkage.as_fields())
        logger.info("OAuth login succeeded", provider=linkage.provider, user_id=user.id)
        return Authenticated(refreshed)

    def _linkage(self, profile: OAuthProfile) -> OAuthLinkage:
        return OAuthLinkage(
            provider=profile.provider,
            provider_user_id=profile.provider_user_id,
            access_token=self._encrypt(profile.access_token),
            refresh_token=self._encrypt(profile.refresh_token),
        )

    def _encrypt(self, token: Optional[str]) -> Optional[bytes]:
        if not token:
            return None
        return self.fernet.encrypt(token.encode())

    def decrypt_token(self, ciphertext: Optional[bytes]) -> Optional[str]:
        """Decrypt a stored provider token, e.g. to call provider APIs for the user."""
        if not ciphertext:
            return None
        return self.fernet.decrypt(ciphertext).decode()
