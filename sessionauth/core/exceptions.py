from __future__ import annotations

"""Centralized, structured exception hierarchy for sessionauth.

Each exception carries a machine-readable `code` for programmatic handling and
a human-readable `message` for logging. The message is never shown to end
users verbatim. Strategy rejections (``Rejected.to_error``) and store failures
are carried to the HTTP layer on ``GateResult.error``; the auth gate maps them
to translated, generic flash messages. Only authentication and store errors
can escape to the JSON handlers in ``core.handlers``.

The hierarchy mirrors the failure taxonomy of the authentication core:

- ``InvalidCredentialsError``: wrong email/password combination (always generic).
- ``ValidationError``: missing or malformed input fields.
- ``DuplicateEmailError``: an account with the email already exists.
- ``ProviderError``: malformed or untrusted OAuth profile / failed handshake.
- ``AccountLinkRequiredError``: OAuth email belongs to a password account.
- ``UserNotFoundError``: a referenced user does not exist.
- ``StoreUnavailableError``: the persistence layer failed.
"""

from typing import Final

__all__: Final = [
    "SessionAuthError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "ProviderError",
    "AccountLinkRequiredError",
    "ValidationError",
    "DuplicateEmailError",
    "UserNotFoundError",
    "StoreUnavailableError",
]


class SessionAuthError(Exception):
    """Base exception class for all custom errors in the application.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Auth-related errors (401)
# ---------------------------------------------------------------------------


class AuthenticationError(SessionAuthError):
    """Raised for general authentication failures. Maps to `401 Unauthorized`."""

    def __init__(self, message: str, code: str = "authentication_error"):
        super().__init__(message, code)


class InvalidCredentialsError(AuthenticationError):
    """Raised when user-provided credentials are invalid.

    To prevent account enumeration the message must be identical whether the
    email is unknown or the password is wrong.
    """

    def __init__(self, message: str = "Invalid email or password", code: str = "invalid_credentials"):
        super().__init__(message, code)


class ProviderError(AuthenticationError):
    """Raised when an OAuth provider returns an unusable or untrusted profile,
    or when the OAuth handshake itself fails."""

    def __init__(self, message: str = "OAuth sign-in failed", code: str = "provider_error"):
        super().__init__(message, code)


class AccountLinkRequiredError(ProviderError):
    """Raised when an OAuth email matches an existing password account that
    has not been explicitly linked to the provider identity."""

    def __init__(
        self,
        message: str = "OAuth email belongs to an unlinked password account",
        code: str = "account_link_required",
    ):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------


class ValidationError(SessionAuthError):
    """Raised for missing or malformed form input.

    The `code` is the i18n key of the message shown to the user.
    """

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Persistence errors
# ---------------------------------------------------------------------------


class DuplicateEmailError(SessionAuthError):
    """Raised when a user with the same email already exists."""

    def __init__(self, message: str = "Email already registered", code: str = "duplicate_email"):
        super().__init__(message, code)


class UserNotFoundError(SessionAuthError):
    """Raised when a requested user is not found."""

    def __init__(self, message: str = "User not found", code: str = "user_not_found"):
        super().__init__(message, code)


class StoreUnavailableError(SessionAuthError):
    """Raised when the user store cannot complete an operation.

    Wraps underlying driver errors so that they never leak past the
    repository. Maps to `503 Service Unavailable`.
    """

    def __init__(self, message: str = "User store unavailable", code: str = "store_unavailable"):
        super().__init__(message, code)
