from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    MEN = "men"
    WOMEN = "women"


class Team(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    team_name: str
    person_in_charge: str
    category: Category
    player_count: int = Field(0, ge=0)
    created_at: datetime


class Player(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    team_id: UUID
    player_name: str
    created_at: datetime


class TeamWithPlayers(Team):
    players: tuple[Player, ...] = ()


class RosterSummary(BaseModel):
    total: int
    men: int
    women: int


class Session(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: UUID
    email: str
    expires_at: datetime
