from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import bcrypt
import jwt
import pytest

from roster.errors import (
    InsufficientRoleError,
    InvalidCredentialsError,
    InvalidTokenError,
    UserAlreadyExistsError,
)
from roster.repositories.user import UserRepository
from roster.services.auth import AuthService

JWT_SECRET = "secret"
JWT_ALGO = "HS256"
TOKEN_EXPIRE = 60
PASSWORD = "Password123"


@pytest.fixture
def user():
    return {
        "user_id": uuid4(),
        "email": "admin@example.com",
        "password_hash": bcrypt.hashpw(PASSWORD.encode(), bcrypt.gensalt()).decode(),
    }


@pytest.fixture
def user_repo(user):
    repo = AsyncMock(spec=UserRepository)
    repo.get_user_by_email.return_value = user
    repo.get_user_by_id.return_value = {
        "user_id": user["user_id"],
        "email": user["email"],
    }
    repo.has_role.return_value = True
    return repo


@pytest.fixture
def service(user_repo):
    return AuthService(user_repo, JWT_SECRET, JWT_ALGO, TOKEN_EXPIRE)


@pytest.mark.asyncio
async def test_sign_in_success(service, user_repo, user):
    session = await service.sign_in("Admin@Example.com ", PASSWORD)

    assert session.user_id == user["user_id"]
    payload = jwt.decode(session.access_token, JWT_SECRET, algorithms=[JWT_ALGO])
    assert payload["sub"] == str(user["user_id"])
    user_repo.get_user_by_email.assert_awaited_once_with("admin@example.com")


@pytest.mark.asyncio
async def test_sign_in_wrong_password(service):
    with pytest.raises(InvalidCredentialsError):
        await service.sign_in("admin@example.com", "WrongPass")


@pytest.mark.asyncio
async def test_sign_in_unknown_user(service, user_repo):
    user_repo.get_user_by_email.return_value = None
    with pytest.raises(InvalidCredentialsError):
        await service.sign_in("nobody@example.com", PASSWORD)


@pytest.mark.asyncio
async def test_get_current_user(service, user):
    session = await service.sign_in("admin@example.com", PASSWORD)

    current = await service.get_current_user(session.access_token)

    assert current["user_id"] == user["user_id"]


@pytest.mark.asyncio
async def test_sign_out_revokes_token(service):
    session = await service.sign_in("admin@example.com", PASSWORD)

    service.sign_out(session.access_token)

    with pytest.raises(InvalidTokenError):
        await service.get_current_user(session.access_token)


@pytest.mark.asyncio
async def test_expired_token(service, user):
    token = jwt.encode(
        {
            "sub": str(user["user_id"]),
            "jti": "x",
            "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
        },
        JWT_SECRET,
        algorithm=JWT_ALGO,
    )
    with pytest.raises(InvalidTokenError):
        await service.get_current_user(token)


@pytest.mark.asyncio
async def test_garbage_token(service):
    with pytest.raises(InvalidTokenError):
        await service.get_current_user("not-a-token")


@pytest.mark.asyncio
async def test_require_role(service, user_repo):
    user_id = uuid4()
    await service.require_role(user_id, "admin")
    user_repo.has_role.assert_awaited_once_with(user_id, "admin")

    user_repo.has_role.return_value = False
    with pytest.raises(InsufficientRoleError):
        await service.require_role(user_id, "admin")


@pytest.mark.asyncio
async def test_create_user_grants_roles(service, user_repo):
    user_repo.get_user_by_email.return_value = None
    user_repo.create_user.return_value = {
        "user_id": uuid4(),
        "email": "new@example.com",
    }

    user = await service.create_user("New@example.com", PASSWORD, roles=["admin"])

    email, password_hash = user_repo.create_user.await_args.args
    assert email == "new@example.com"
    assert bcrypt.checkpw(PASSWORD.encode(), password_hash.encode())
    user_repo.grant_role.assert_awaited_once_with(user["user_id"], "admin")


@pytest.mark.asyncio
async def test_create_user_existing(service):
    with pytest.raises(UserAlreadyExistsError):
        await service.create_user("admin@example.com", PASSWORD)


@pytest.mark.asyncio
async def test_expired_revocations_are_pruned(service):
    first = await service.sign_in("admin@example.com", PASSWORD)
    second = await service.sign_in("admin@example.com", PASSWORD)
    service.sign_out(first.access_token)
    service.sign_out(second.access_token)

    assert service.prune_revoked() == 0
    with pytest.raises(InvalidTokenError):
        await service.get_current_user(first.access_token)

    later = datetime.now(timezone.utc) + timedelta(minutes=TOKEN_EXPIRE + 1)
    assert service.prune_revoked(now=later) == 2
    assert service.prune_revoked(now=later) == 0
