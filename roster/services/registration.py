import logging
from typing import Sequence

from roster.errors import (
    IncompleteRosterError,
    InvalidRosterSizeError,
    RegistrationError,
    RegistrationFailedError,
    RepositoryError,
    RosterError,
    ValidationError,
)
from roster.models import Category, Team
from roster.repositories.player import PlayerRepository
from roster.repositories.team import TeamRepository
from roster.services.policy import validate_roster_size, validate_text_field
from roster.services.roster_cache import RosterCache

log: logging.Logger = logging.getLogger(__name__)


class RegistrationService:
    """
    Registers a team together with its initial players.

    Validation runs before any write. The team row and the player rows are two
    separate writes; if the players cannot be stored the team row is deleted
    again and the registration is reported as failed.
    """

    def __init__(
        self,
        team_repository: TeamRepository,
        player_repository: PlayerRepository,
        roster_cache: RosterCache | None = None,
    ):
        self.team_repository = team_repository
        self.player_repository = player_repository
        self.roster_cache = roster_cache

    async def register_team(
        self,
        category: Category,
        team_name: str,
        person_in_charge: str,
        player_names: Sequence[str],
    ) -> Team:
        try:
            category = Category(category)
            team_name = validate_text_field(team_name, "team_name")
            person_in_charge = validate_text_field(person_in_charge, "person_in_charge")
        except ValidationError as e:
            raise RegistrationError(str(e)) from e
        except ValueError as e:
            raise RegistrationError(f"category: {e}") from e

        names = [(name or "").strip() for name in player_names]
        blank = [i for i, name in enumerate(names) if not name]
        if blank:
            raise IncompleteRosterError(blank)

        try:
            validate_roster_size(category, len(names))
        except RosterError as e:
            raise InvalidRosterSizeError(str(e)) from e

        try:
            team = await self.team_repository.create_team(
                team_name, person_in_charge, category, player_count=len(names)
            )
        except RepositoryError as e:
            log.error(f"Could not create team '{team_name}': {e}")
            raise RegistrationFailedError("Team could not be created") from e

        try:
            await self.player_repository.create_players(team.id, names)
        except RepositoryError as e:
            log.error(f"Could not create players of team {team.id}: {e}")
            await self._compensate(team, e)

        log.info(f"Registered team {team.id} ({team_name}) with {len(names)} players")
        self._notify()
        return team

    async def _compensate(self, team: Team, cause: RepositoryError) -> None:
        try:
            await self.team_repository.delete_team(team.id)
        except RepositoryError as e:
            log.error(
                f"Team {team.id} left without players, rollback failed: {e}"
            )
            self._notify()
            raise RegistrationFailedError(
                "Players could not be created and the team could not be removed",
                team=team,
                rolled_back=False,
            ) from cause
        log.warning(f"Rolled back team {team.id} after failed player insert")
        raise RegistrationFailedError(
            "Players could not be created", rolled_back=True
        ) from cause

    def _notify(self) -> None:
        if self.roster_cache is not None:
            self.roster_cache.invalidate()


def make_registration_service(
    team_repository: TeamRepository,
    player_repository: PlayerRepository,
    roster_cache: RosterCache | None = None,
) -> RegistrationService:
    return RegistrationService(team_repository, player_repository, roster_cache)
