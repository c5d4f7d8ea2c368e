from datetime import timedelta

import pytest

from app.exceptions import Conflict, Unauthenticated
from app.models import UserRole
from app.services.auth import (
    AuthService,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.services.registration import RegistrationEngine
from tests.helpers import TEST_PASSWORD, add_event


def test_password_hashing():
    hashed = hash_password("s3cret!")

    assert hashed != "s3cret!"
    assert verify_password("s3cret!", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret!", "not-a-bcrypt-hash")


@pytest.mark.asyncio
async def test_token_round_trip(member):
    context = decode_access_token(create_access_token(member))

    assert context.user_id == member.id
    assert context.username == "member"
    assert not context.is_admin


@pytest.mark.asyncio
async def test_expired_or_tampered_token(member):
    expired = create_access_token(member, expires_delta=timedelta(seconds=-1))
    with pytest.raises(Unauthenticated):
        decode_access_token(expired)

    with pytest.raises(Unauthenticated):
        decode_access_token(create_access_token(member) + "x")


@pytest.mark.asyncio
async def test_register_user(session):
    user = await AuthService(session).register_user("jane_doe", "Jane@Example.com", "s3cret!")

    assert user.id is not None
    assert user.role == UserRole.USER.value
    assert user.email == "jane@example.com"
    assert user.password != "s3cret!"


@pytest.mark.asyncio
async def test_register_user_conflicts(session, member):
    service = AuthService(session)

    with pytest.raises(Conflict):
        await service.register_user("member", "new@example.com", "s3cret!")
    with pytest.raises(Conflict):
        await service.register_user("newcomer", "MEMBER@example.com", "s3cret!")


@pytest.mark.asyncio
async def test_authenticate(session, member):
    service = AuthService(session)

    user, token = await service.authenticate("member@example.com", TEST_PASSWORD)
    assert user.id == member.id
    assert decode_access_token(token).user_id == member.id

    with pytest.raises(Unauthenticated) as wrong_password:
        await service.authenticate("member@example.com", "nope")
    with pytest.raises(Unauthenticated) as unknown_email:
        await service.authenticate("ghost@example.com", TEST_PASSWORD)
    assert wrong_password.value.message == unknown_email.value.message


@pytest.mark.asyncio
async def test_profile_stats(db, session, admin, member):
    event = await add_event(db, admin)
    await RegistrationEngine(db).register(member.id, event.id)

    profile = await AuthService(session).get_profile(member.id)
    assert profile["stats"] == {"participations": 1, "evaluations": 0}

    profile = await AuthService(session).get_profile(admin.id)
    assert profile["stats"]["events_created"] == 1
    assert profile["stats"]["total_users"] == 2
    assert profile["stats"]["total_events"] == 1
