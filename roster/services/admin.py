import logging
from uuid import UUID

from roster.errors import RepositoryError, ValidationError
from roster.models import Category, Player, Team
from roster.repositories.player import PlayerRepository
from roster.repositories.team import TeamRepository
from roster.services.policy import (
    check_admin_capacity,
    validate_player_name,
    validate_text_field,
)
from roster.services.roster_cache import RosterCache

log: logging.Logger = logging.getLogger(__name__)


class AdminService:
    def __init__(
        self,
        team_repository: TeamRepository,
        player_repository: PlayerRepository,
        roster_cache: RosterCache,
    ):
        self.team_repository = team_repository
        self.player_repository = player_repository
        self.roster_cache = roster_cache

    async def edit_team_fields(
        self,
        team_id: UUID,
        team_name: str | None = None,
        person_in_charge: str | None = None,
    ) -> None:
        fields = {}
        if team_name is not None:
            fields["team_name"] = validate_text_field(team_name, "team_name")
        if person_in_charge is not None:
            fields["person_in_charge"] = validate_text_field(
                person_in_charge, "person_in_charge"
            )
        if not fields:
            raise ValidationError("team", "nothing to update")

        await self.team_repository.update_team(team_id, **fields)
        await self._resync()

    async def delete_team_by_id(self, team_id: UUID) -> None:
        await self.team_repository.get_team(team_id)
        deleted = await self.player_repository.delete_players_for_team(team_id)
        await self.team_repository.delete_team(team_id)
        log.info(f"Admin deleted team {team_id} and {deleted} players")
        await self._resync()

    async def edit_player_name(self, player_id: UUID, name: str) -> None:
        name = validate_player_name(name)
        await self.player_repository.update_player(player_id, name)
        await self._resync()

    async def delete_player_by_id(self, player_id: UUID) -> None:
        team_id = await self.player_repository.delete_player(player_id)
        log.info(f"Admin deleted player {player_id} from team {team_id}")
        await self._resync()

    async def create_team_manually(
        self, team_name: str, person_in_charge: str, category: Category
    ) -> Team:
        # administrators may create empty teams; roster size is not checked
        team_name = validate_text_field(team_name, "team_name")
        person_in_charge = validate_text_field(person_in_charge, "person_in_charge")
        team = await self.team_repository.create_team(
            team_name, person_in_charge, Category(category), player_count=0
        )
        await self._resync()
        return team

    async def add_player_to_team(self, team_id: UUID, name: str) -> Player:
        name = validate_player_name(name)
        team = await self.roster_cache.find_team(team_id, fresh=True)
        check_admin_capacity(team.player_count)

        player = await self.player_repository.create_player(team_id, name)
        try:
            await self.team_repository.update_team(
                team_id, player_count=team.player_count + 1
            )
        except RepositoryError as e:
            log.error(
                f"Player {player.id} added to team {team_id} "
                f"but player_count was not updated: {e}"
            )
            self.roster_cache.invalidate()
            raise

        await self._resync()
        return player

    async def _resync(self) -> None:
        # the write already happened; a failed read must leave the cache stale
        self.roster_cache.invalidate()
        await self.roster_cache.refresh()


def make_admin_service(
    team_repository: TeamRepository,
    player_repository: PlayerRepository,
    roster_cache: RosterCache,
) -> AdminService:
    return AdminService(team_repository, player_repository, roster_cache)
