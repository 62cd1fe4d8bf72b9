"""Result types produced by authentication strategies.

Strategies never raise for an expected authentication failure; they return
either ``Authenticated`` or ``Rejected`` and the auth gate decides what the
caller sees.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Type, Union

from sessionauth.core.exceptions import (
    AccountLinkRequiredError,
    InvalidCredentialsError,
    ProviderError,
    SessionAuthError,
    StoreUnavailableError,
)
from sessionauth.domain.entities.user import User


class RejectionReason(str, Enum):
    """Why an authentication attempt did not produce a user.

    Each value is the ``code`` of the matching exception in
    ``sessionauth.core.exceptions``.
    """

    INVALID_CREDENTIALS = "invalid_credentials"
    PROVIDER_ERROR = "provider_error"
    ACCOUNT_LINK_REQUIRED = "account_link_required"
    STORE_UNAVAILABLE = "store_unavailable"


@dataclass(frozen=True)
class Authenticated:
    user: User

    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Rejected:
    """A failed attempt.

    Attributes:
        reason: Machine-readable cause, used by the gate to pick a message.
        message_key: i18n key of the user-facing message.
    """

    reason: RejectionReason
    message_key: str

    ok: ClassVar[bool] = False

    def to_error(self) -> SessionAuthError:
        """The taxonomy exception for this rejection."""
        return REASON_ERRORS[self.reason]()


AuthOutcome = Union[Authenticated, Rejected]

REASON_ERRORS: Dict[RejectionReason, Type[SessionAuthError]] = {
    RejectionReason.INVALID_CREDENTIALS: InvalidCredentialsError,
    RejectionReason.PROVIDER_ERROR: ProviderError,
    RejectionReason.ACCOUNT_LINK_REQUIRED: AccountLinkRequiredError,
    RejectionReason.STORE_UNAVAILABLE: StoreUnavailableError,
}

INVALID_CREDENTIALS = Rejected(RejectionReason.INVALID_CREDENTIALS, "invalid_email_or_password")
STORE_UNAVAILABLE = Rejected(RejectionReason.STORE_UNAVAILABLE, "service_temporarily_unavailable")
