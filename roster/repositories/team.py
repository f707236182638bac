import logging
from uuid import UUID

import asyncpg

from roster.errors import RecordNotFoundError
from roster.models import Category, Team
from roster.repositories.base import affected_rows, translate_store_errors

log: logging.Logger = logging.getLogger(__name__)

TEAM_COLUMNS = "id, team_name, person_in_charge, category, player_count, created_at"
UPDATABLE_COLUMNS = ("team_name", "person_in_charge", "player_count")


class TeamRepository:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool: asyncpg.Pool = pool

    @translate_store_errors("team")
    async def create_team(
        self,
        team_name: str,
        person_in_charge: str,
        category: Category,
        player_count: int = 0,
    ) -> Team:
        query = f"""
        INSERT INTO teams (team_name, person_in_charge, category, player_count)
        VALUES ($1, $2, $3, $4)
        RETURNING {TEAM_COLUMNS}
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                query,
                team_name,
                person_in_charge,
                Category(category).value,
                player_count,
            )
        log.info(f"Created team {row['id']} ({team_name})")
        return Team(**dict(row))

    @translate_store_errors("team")
    async def list_teams(self) -> list[Team]:
        query = f"""
        SELECT {TEAM_COLUMNS}
        FROM teams
        ORDER BY created_at DESC
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query)
        return [Team(**dict(row)) for row in rows]

    @translate_store_errors("team")
    async def get_team(self, team_id: UUID) -> Team:
        query = f"""
        SELECT {TEAM_COLUMNS}
        FROM teams
        WHERE id = $1
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, team_id)
        if not row:
            raise RecordNotFoundError("team", team_id)
        return Team(**dict(row))

    @translate_store_errors("team")
    async def update_team(self, team_id: UUID, **fields) -> None:
        unknown = set(fields) - set(UPDATABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Columns not updatable: {sorted(unknown)}")
        if not fields:
            raise ValueError("No columns to update")

        columns = list(fields)
        assignments = ", ".join(f"{c} = ${i}" for i, c in enumerate(columns, start=2))
        query = f"UPDATE teams SET {assignments} WHERE id = $1"
        async with self.pool.acquire() as conn:
            status = await conn.execute(query, team_id, *(fields[c] for c in columns))
        if affected_rows(status) == 0:
            raise RecordNotFoundError("team", team_id)
        log.info(f"Updated team {team_id}: {columns}")

    @translate_store_errors("team")
    async def delete_team(self, team_id: UUID) -> None:
        async with self.pool.acquire() as conn:
            status = await conn.execute("DELETE FROM teams WHERE id = $1", team_id)
        if affected_rows(status) == 0:
            raise RecordNotFoundError("team", team_id)
        log.info(f"Deleted team {team_id}")


def make_team_repository(pool: asyncpg.Pool) -> TeamRepository:
    return TeamRepository(pool)
