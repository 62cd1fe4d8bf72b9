import pytest

from sessionauth.core.exceptions import (
    AccountLinkRequiredError,
    AuthenticationError,
    DuplicateEmailError,
    InvalidCredentialsError,
    ProviderError,
    SessionAuthError,
    StoreUnavailableError,
    UserNotFoundError,
    ValidationError,
)
from sessionauth.domain.value_objects.auth_outcome import Rejected, RejectionReason


@pytest.mark.parametrize(
    "exc,code",
    [
        (InvalidCredentialsError(), "invalid_credentials"),
        (ProviderError("bad profile"), "provider_error"),
        (AccountLinkRequiredError("link first"), "account_link_required"),
        (ValidationError("missing field"), "validation_error"),
        (DuplicateEmailError(), "duplicate_email"),
        (UserNotFoundError(), "user_not_found"),
        (StoreUnavailableError(), "store_unavailable"),
    ],
)
def test_codes(exc, code):
    assert exc.code == code
    assert isinstance(exc, SessionAuthError)


def test_hierarchy():
    assert issubclass(InvalidCredentialsError, AuthenticationError)
    assert issubclass(AccountLinkRequiredError, ProviderError)
    assert issubclass(ProviderError, AuthenticationError)
    assert not issubclass(StoreUnavailableError, AuthenticationError)


def test_message_and_str():
    exc = AuthenticationError("Authentication required", code="login_required")

    assert exc.message == "Authentication required"
    assert str(exc) == "Authentication required"
    assert exc.code == "login_required"


def test_invalid_credentials_message_is_generic():
    assert str(InvalidCredentialsError()) == "Invalid email or password"


@pytest.mark.parametrize("reason", list(RejectionReason))
def test_every_rejection_reason_maps_to_its_exception(reason):
    error = Rejected(reason, "any_key").to_error()

    assert isinstance(error, SessionAuthError)
    assert error.code == reason.value
