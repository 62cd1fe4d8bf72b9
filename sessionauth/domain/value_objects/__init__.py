"""Domain Value Objects for the authentication domain."""

from .auth_outcome import AuthOutcome, Authenticated, Rejected, RejectionReason
from .email import Email
from .oauth_profile import OAuthProfile

__all__ = [
    "AuthOutcome",
    "Authenticated",
    "Rejected",
    "RejectionReason",
    "Email",
    "OAuthProfile",
]
