import datetime
import uuid

import pytest

from roster.models import Category, Player, Team

BASE_TIME = datetime.datetime(2025, 3, 1, 12, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture
def make_team():
    counter = iter(range(10_000))

    def _make_team(
        team_name: str = "Halcones",
        person_in_charge: str = "Luis",
        category: Category = Category.MEN,
        player_count: int = 0,
        **overrides,
    ) -> Team:
        data = {
            "id": uuid.uuid4(),
            "team_name": team_name,
            "person_in_charge": person_in_charge,
            "category": category,
            "player_count": player_count,
            "created_at": BASE_TIME + datetime.timedelta(minutes=next(counter)),
        }
        data.update(overrides)
        return Team(**data)

    return _make_team


@pytest.fixture
def make_player():
    counter = iter(range(10_000))

    def _make_player(team_id: uuid.UUID, player_name: str = "Jugador") -> Player:
        return Player(
            id=uuid.uuid4(),
            team_id=team_id,
            player_name=player_name,
            created_at=BASE_TIME + datetime.timedelta(seconds=next(counter)),
        )

    return _make_player
