from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from roster.create_admin import create_admin, parse_args
from roster.services.auth import AuthService


def test_parse_args():
    args = parse_args(["--email", "admin@example.com", "--password", "Secret123"])
    assert args.email == "admin@example.com"
    assert args.password == "Secret123"
    assert args.env_file == ".env"


def test_parse_args_requires_email():
    with pytest.raises(SystemExit):
        parse_args([])


@pytest.mark.asyncio
async def test_create_admin_grants_role():
    auth_service = AsyncMock(spec=AuthService)
    auth_service.create_user.return_value = {
        "user_id": uuid4(),
        "email": "admin@example.com",
    }

    user = await create_admin(auth_service, "admin@example.com", "Secret123")

    assert user["email"] == "admin@example.com"
    auth_service.create_user.assert_awaited_once_with(
        "admin@example.com", "Secret123", roles=["admin"]
    )
