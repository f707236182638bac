import logging
from collections import defaultdict
from typing import Iterable, Sequence
from uuid import UUID

from roster.errors import RecordNotFoundError
from roster.models import Category, Player, RosterSummary, Team, TeamWithPlayers
from roster.repositories.player import PlayerRepository
from roster.repositories.team import TeamRepository

log: logging.Logger = logging.getLogger(__name__)


def group_players(
    teams: Sequence[Team], players: Sequence[Player]
) -> list[TeamWithPlayers]:
    """
    Join teams with their players.

    Players keep the order they arrive in (creation order). Each team's
    player_count is recomputed from its player list, so a stale counter in the
    store never leaks into the projection.
    """
    by_team: dict[UUID, list[Player]] = defaultdict(list)
    for player in players:
        by_team[player.team_id].append(player)

    result = []
    for team in teams:
        team_players = tuple(by_team.get(team.id, ()))
        if team.player_count != len(team_players):
            log.warning(
                f"Team {team.id} stores player_count={team.player_count} "
                f"but has {len(team_players)} players"
            )
        data = team.model_dump(exclude={"players"})
        data["player_count"] = len(team_players)
        result.append(TeamWithPlayers(**data, players=team_players))
    return result


def filter_by_category(
    teams: Iterable[TeamWithPlayers], category: Category | None = None
) -> list[TeamWithPlayers]:
    if category is None:
        return list(teams)
    return [t for t in teams if t.category == category]


def count_by_category(teams: Iterable[TeamWithPlayers], category: Category) -> int:
    return sum(1 for t in teams if t.category == category)


def summarize(teams: Sequence[TeamWithPlayers]) -> RosterSummary:
    return RosterSummary(
        total=len(teams),
        men=count_by_category(teams, Category.MEN),
        women=count_by_category(teams, Category.WOMEN),
    )


def toggle_expansion(expanded: frozenset[UUID], team_id: UUID) -> frozenset[UUID]:
    if team_id in expanded:
        return expanded - {team_id}
    return expanded | {team_id}


class RosterCache:
    """In-memory team -> players projection, refreshed wholesale from the store."""

    def __init__(
        self, team_repository: TeamRepository, player_repository: PlayerRepository
    ) -> None:
        self.team_repository = team_repository
        self.player_repository = player_repository
        self._teams: tuple[TeamWithPlayers, ...] = ()
        self._stale = True

    @property
    def teams(self) -> tuple[TeamWithPlayers, ...]:
        return self._teams

    @property
    def is_stale(self) -> bool:
        return self._stale

    def invalidate(self) -> None:
        self._stale = True

    async def refresh(self) -> list[TeamWithPlayers]:
        # stays stale until both reads succeed
        self._stale = True
        teams = await self.team_repository.list_teams()
        players = await self.player_repository.list_players()
        self._teams = tuple(group_players(teams, players))
        self._stale = False
        log.info(f"Roster refreshed: {len(teams)} teams, {len(players)} players")
        return list(self._teams)

    async def snapshot(self) -> list[TeamWithPlayers]:
        if self._stale:
            return await self.refresh()
        return list(self._teams)

    async def find_team(self, team_id: UUID, fresh: bool = False) -> TeamWithPlayers:
        teams = await self.refresh() if fresh else await self.snapshot()
        for team in teams:
            if team.id == team_id:
                return team
        raise RecordNotFoundError("team", team_id)

    def prune_expansion(self, expanded: frozenset[UUID]) -> frozenset[UUID]:
        known = {t.id for t in self._teams}
        return frozenset(team_id for team_id in expanded if team_id in known)


def make_roster_cache(
    team_repository: TeamRepository, player_repository: PlayerRepository
) -> RosterCache:
    return RosterCache(team_repository, player_repository)
