from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

import asyncpg
import pytest
from fastapi.testclient import TestClient

from roster.config import Settings
from roster.main import create_app


class FakePool:
    def __init__(self, fail: bool = False):
        self.conn = AsyncMock()
        if fail:
            self.conn.execute.side_effect = asyncpg.InterfaceError("closed")
        self.closed = False

    @asynccontextmanager
    async def acquire(self):
        yield self.conn

    async def close(self):
        self.closed = True


@pytest.fixture
def settings():
    return Settings(_env_file=None, APPLY_SCHEMA=False)


def test_app_starts_and_reports_health(settings):
    pool = FakePool()
    with patch("roster.main.asyncpg.create_pool", AsyncMock(return_value=pool)):
        app = create_app(settings)
        with TestClient(app) as client:
            assert client.get("/health").json() == {"status": "ok"}
            paths = {route.path for route in app.routes}
            assert "/api/v1/teams/register" in paths
            assert "/api/v1/admin/teams/{team_id}/players" in paths
            assert "/api/v1/auth/login" in paths

    assert pool.closed


def test_health_fails_when_store_is_down(settings):
    pool = FakePool(fail=True)
    with patch("roster.main.asyncpg.create_pool", AsyncMock(return_value=pool)):
        with TestClient(create_app(settings)) as client:
            assert client.get("/health").json() == {"status": "fail"}


def test_admin_routes_require_token(settings):
    with patch("roster.main.asyncpg.create_pool", AsyncMock(return_value=FakePool())):
        with TestClient(create_app(settings)) as client:
            response = client.get("/api/v1/admin/teams")
            assert response.status_code == 401


def test_schema_applied_on_startup():
    settings = Settings(_env_file=None, APPLY_SCHEMA=True)
    pool = FakePool()
    with patch("roster.main.asyncpg.create_pool", AsyncMock(return_value=pool)):
        with TestClient(create_app(settings)):
            pass
    executed = [call.args[0] for call in pool.conn.execute.await_args_list]
    assert any("CREATE TABLE IF NOT EXISTS teams" in sql for sql in executed)
