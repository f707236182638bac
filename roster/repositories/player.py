import logging
from typing import Sequence
from uuid import UUID

import asyncpg

from roster.errors import RecordNotFoundError
from roster.models import Player
from roster.repositories.base import affected_rows, translate_store_errors

log: logging.Logger = logging.getLogger(__name__)

PLAYER_COLUMNS = "id, team_id, player_name, created_at"


class PlayerRepository:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool: asyncpg.Pool = pool

    @translate_store_errors("team")
    async def create_player(self, team_id: UUID, player_name: str) -> Player:
        query = f"""
        INSERT INTO players (team_id, player_name)
        VALUES ($1, $2)
        RETURNING {PLAYER_COLUMNS}
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, team_id, player_name)
        log.info(f"Created player {row['id']} in team {team_id}")
        return Player(**dict(row))

    @translate_store_errors("team")
    async def create_players(
        self, team_id: UUID, names: Sequence[str]
    ) -> list[Player]:
        if not names:
            raise ValueError("At least one player name is required")

        # database clock, offset by position so input order survives equal ticks
        query = f"""
        INSERT INTO players (team_id, player_name, created_at)
        SELECT $1::uuid, name, clock_timestamp() + ord * INTERVAL '1 microsecond'
        FROM unnest($2::text[]) WITH ORDINALITY AS input(name, ord)
        ORDER BY ord
        RETURNING {PLAYER_COLUMNS}
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, team_id, list(names))
        players = sorted(
            (Player(**dict(row)) for row in rows), key=lambda p: p.created_at
        )
        log.info(f"Created {len(players)} players in team {team_id}")
        return players

    @translate_store_errors("player")
    async def list_players(self) -> list[Player]:
        query = f"""
        SELECT {PLAYER_COLUMNS}
        FROM players
        ORDER BY created_at ASC
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query)
        return [Player(**dict(row)) for row in rows]

    @translate_store_errors("player")
    async def update_player(self, player_id: UUID, player_name: str) -> None:
        async with self.pool.acquire() as conn:
            status = await conn.execute(
                "UPDATE players SET player_name = $2 WHERE id = $1",
                player_id,
                player_name,
            )
        if affected_rows(status) == 0:
            raise RecordNotFoundError("player", player_id)
        log.info(f"Renamed player {player_id}")

    @translate_store_errors("player")
    async def delete_player(self, player_id: UUID) -> UUID:
        """
        Delete a player and resync the owning team's player_count.

        Returns the id of the team the player belonged to.
        """
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                team_id = await conn.fetchval(
                    "DELETE FROM players WHERE id = $1 RETURNING team_id", player_id
                )
                if team_id is None:
                    raise RecordNotFoundError("player", player_id)
                await conn.execute(
                    """
                    UPDATE teams
                    SET player_count = (SELECT count(*) FROM players WHERE team_id = $1)
                    WHERE id = $1
                    """,
                    team_id,
                )
        log.info(f"Deleted player {player_id} from team {team_id}")
        return team_id

    @translate_store_errors("player")
    async def delete_players_for_team(self, team_id: UUID) -> int:
        async with self.pool.acquire() as conn:
            status = await conn.execute(
                "DELETE FROM players WHERE team_id = $1", team_id
            )
        deleted = affected_rows(status)
        log.info(f"Deleted {deleted} players of team {team_id}")
        return deleted


def make_player_repository(pool: asyncpg.Pool) -> PlayerRepository:
    return PlayerRepository(pool)
