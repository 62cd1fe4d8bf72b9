"""Value Object for the identity claims returned by an OAuth2 provider.

An ``OAuthProfile`` is produced by the infrastructure OAuth client after a
successful authorization-code exchange. The domain never talks to the
provider itself; it only applies identity-resolution policy on top of this
already-verified profile.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from sessionauth.domain.value_objects.email import Email


@dataclass(frozen=True, slots=True)
class OAuthProfile:
    """Identity claims and tokens for one provider login.

    Attributes:
        provider: Provider name, e.g. ``google``.
        provider_user_id: Provider-issued stable subject identifier.
        email: Primary email claim, as returned by the provider (not normalized).
        email_verified: Whether the provider vouches for the email address.
        access_token: Provider access token.
        refresh_token: Provider refresh token, when one was issued.
        display_name: Optional human-readable name.
    """

    provider: str
    provider_user_id: str
    email: Optional[str]
    email_verified: bool = True
    access_token: Optional[str] = field(default=None, repr=False)
    refresh_token: Optional[str] = field(default=None, repr=False)
    display_name: Optional[str] = None

    @classmethod
    def from_provider_payload(
        cls,
        provider: str,
        userinfo: Mapping[str, Any],
        token: Optional[Mapping[str, Any]] = None,
    ) -> "OAuthProfile":
        """Build a profile from an OIDC userinfo payload.

        Both the OpenID Connect shape (``sub``/``email``/``email_verified``)
        and the Passport-style shape (``id``/``emails: [{"value": ...}]``)
        are accepted. Missing claims are left empty; it is up to the OAuth
        strategy to reject an unusable profile.
        """
        token = token or {}
        provider_user_id = userinfo.get("sub") or userinfo.get("id") or ""

        email = userinfo.get("email")
        if not email:
            emails = userinfo.get("emails") or []
            if emails and isinstance(emails[0], Mapping):
                email = emails[0].get("value")

        verified = userinfo.get("email_verified", userinfo.get("verified_email", True))
        if isinstance(verified, str):
            verified = verified.lower() == "true"

        return cls(
            provider=provider,
            provider_user_id=str(provider_user_id),
            email=email,
            email_verified=bool(verified),
            access_token=token.get("access_token"),
            refresh_token=token.get("refresh_token"),
            display_name=userinfo.get("name") or userinfo.get("displayName"),
        )

    def primary_email(self) -> Optional[Email]:
        """The normalized primary email, or ``None`` if absent or malformed."""
        if not self.email:
            return None
        try:
            return Email(self.email)
        except (TypeError, ValueError):
            return None
