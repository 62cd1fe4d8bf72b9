import pytest

from sessionauth.domain.services.auth.session import SessionCodec
from tests.factories.user import create_fake_user


@pytest.fixture
def codec(memory_repository):
    return SessionCodec(memory_repository)


@pytest.mark.asyncio
async def test_store_then_resolve(codec, memory_repository):
    user = memory_repository.add(create_fake_user())
    session = {}

    codec.store(session, user)

    assert session == {SessionCodec.SESSION_KEY: user.id}
    assert (await codec.resolve(session)).id == user.id


@pytest.mark.asyncio
async def test_anonymous_session_resolves_to_none(codec):
    assert await codec.resolve({}) is None
    assert codec.has_identity({}) is False


@pytest.mark.asyncio
async def test_deleted_user_resolves_to_none(codec):
    session = {SessionCodec.SESSION_KEY: "0" * 32}

    assert codec.has_identity(session) is True
    assert await codec.resolve(session) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("value", [42, "", ["id"]])
async def test_malformed_identity_resolves_to_none(codec, value):
    assert await codec.resolve({SessionCodec.SESSION_KEY: value}) is None


def test_clear_drops_everything(codec):
    session = {SessionCodec.SESSION_KEY: "abc", "_flash": {"info": ["hi"]}}

    codec.clear(session)

    assert session == {}


def test_forget_keeps_flash_messages(codec):
    session = {SessionCodec.SESSION_KEY: "abc", "_flash": {"info": ["hi"]}}

    codec.forget(session)

    assert session == {"_flash": {"info": ["hi"]}}


def test_forget_anonymous_session_is_a_noop(codec):
    session = {}

    codec.forget(session)

    assert session == {}
