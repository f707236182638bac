from uuid import UUID

import asyncpg

from roster.repositories.base import translate_store_errors


class UserRepository:
    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    @translate_store_errors("user")
    async def create_user(self, email: str, password_hash: str) -> dict:
        query = """
        INSERT INTO users (email, password_hash, created_at)
        VALUES ($1, $2, NOW())
        RETURNING user_id, email, created_at
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, email, password_hash)
        return dict(row)

    @translate_store_errors("user")
    async def get_user_by_email(self, email: str) -> dict | None:
        query = """
        SELECT user_id, email, password_hash, created_at
        FROM users
        WHERE email = $1
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, email)
        return dict(row) if row else None

    @translate_store_errors("user")
    async def get_user_by_id(self, user_id: UUID) -> dict | None:
        query = """
        SELECT user_id, email, created_at
        FROM users
        WHERE user_id = $1
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, user_id)
        return dict(row) if row else None

    @translate_store_errors("user")
    async def grant_role(self, user_id: UUID, role: str) -> None:
        query = """
        INSERT INTO user_roles (user_id, role)
        VALUES ($1, $2)
        ON CONFLICT (user_id, role) DO NOTHING
        """
        async with self.pool.acquire() as conn:
            await conn.execute(query, user_id, role)

    @translate_store_errors("user")
    async def has_role(self, user_id: UUID, role: str) -> bool:
        query = """
        SELECT 1
        FROM user_roles
        WHERE user_id = $1 AND role = $2
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, user_id, role)
        return row is not None


def make_user_repository(pool: asyncpg.Pool) -> UserRepository:
    return UserRepository(pool)
