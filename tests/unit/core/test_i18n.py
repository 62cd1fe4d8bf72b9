from starlette.requests import Request

from sessionauth.utils.i18n import get_request_language, get_translated_message, setup_i18n


def _request(query: str = "", accept_language: str = None) -> Request:
    headers = []
    if accept_language is not None:
        headers.append((b"accept-language", accept_language.encode()))
    return Request({"type": "http", "query_string": query.encode(), "headers": headers})


def test_translates_known_keys():
    setup_i18n()

    assert get_translated_message("invalid_email_or_password", "en") == "Invalid email or password"
    assert get_translated_message("invalid_email_or_password", "es") == "Correo electrónico o contraseña no válidos"


def test_unsupported_locale_falls_back_to_default():
    assert get_translated_message("account_successfully_created", "fr") == "account successfully created"


def test_unknown_key_is_returned_as_is():
    assert get_translated_message("no_such_key", "en") == "no_such_key"


def test_every_english_key_has_a_spanish_translation():
    keys = [
        "invalid_email_or_password",
        "email_and_password_required",
        "invalid_email_format",
        "account_already_exists",
        "account_successfully_created",
        "oauth_login_failed",
        "oauth_account_link_required",
        "oauth_not_configured",
        "profile_updated",
        "profile_update_fields_required",
        "login_required",
        "service_temporarily_unavailable",
        "system_operational",
    ]
    for key in keys:
        assert get_translated_message(key, "en") != key
        assert get_translated_message(key, "es") != key
        assert get_translated_message(key, "es") != get_translated_message(key, "en")


def test_request_language_prefers_query_parameter():
    assert get_request_language(_request("lang=es", "en-US")) == "es"


def test_request_language_from_accept_language_header():
    assert get_request_language(_request(accept_language="es-ES,es;q=0.9,en;q=0.8")) == "es"


def test_request_language_default():
    assert get_request_language(_request("lang=de", "de-DE")) == "en"
    assert get_request_language(_request()) == "en"
