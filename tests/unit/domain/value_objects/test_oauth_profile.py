from sessionauth.domain.value_objects.oauth_profile import OAuthProfile


def test_from_oidc_userinfo():
    profile = OAuthProfile.from_provider_payload(
        "google",
        {"sub": "1234", "email": "Bob@Example.com", "email_verified": True, "name": "Bob"},
        {"access_token": "at", "refresh_token": "rt"},
    )

    assert profile.provider == "google"
    assert profile.provider_user_id == "1234"
    assert profile.email == "Bob@Example.com"
    assert profile.email_verified is True
    assert profile.access_token == "at"
    assert profile.refresh_token == "rt"
    assert profile.display_name == "Bob"


def test_from_passport_shaped_payload():
    profile = OAuthProfile.from_provider_payload(
        "google",
        {"id": 987, "emails": [{"value": "carol@example.com"}], "displayName": "Carol"},
    )

    assert profile.provider_user_id == "987"
    assert profile.email == "carol@example.com"
    assert profile.display_name == "Carol"
    assert profile.access_token is None


def test_verified_flag_variants():
    unverified = OAuthProfile.from_provider_payload(
        "google", {"sub": "1", "email": "a@example.com", "verified_email": False}
    )
    string_flag = OAuthProfile.from_provider_payload(
        "google", {"sub": "1", "email": "a@example.com", "email_verified": "false"}
    )

    assert unverified.email_verified is False
    assert string_flag.email_verified is False


def test_missing_claims_are_left_empty():
    profile = OAuthProfile.from_provider_payload("google", {"emails": []})

    assert profile.provider_user_id == ""
    assert profile.email is None
    assert profile.primary_email() is None


def test_primary_email_normalizes_and_rejects_malformed():
    good = OAuthProfile(provider="google", provider_user_id="1", email=" Dave@Example.com")
    bad = OAuthProfile(provider="google", provider_user_id="1", email="dave")

    assert good.primary_email().value == "dave@example.com"
    assert bad.primary_email() is None


def test_tokens_hidden_from_repr():
    profile = OAuthProfile(provider="google", provider_user_id="1", email="e@example.com", access_token="secret-token")

    assert "secret-token" not in repr(profile)
