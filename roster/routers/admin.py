from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from roster.models import Category
from roster.routers.errors import DOMAIN_ERRORS, to_http_error
from roster.routers.teams import TeamResponse
from roster.services.admin import AdminService
from roster.services.roster_cache import RosterCache, filter_by_category


class PlayerResponse(BaseModel):
    id: UUID = Field(..., title="ID del jugador")
    team_id: UUID = Field(..., title="ID del equipo")
    player_name: str = Field(..., title="Nombre del jugador")
    created_at: datetime = Field(..., title="Fecha de inscripción")


class TeamWithPlayersResponse(TeamResponse):
    players: list[PlayerResponse] = Field(default_factory=list, title="Jugadores")


class TeamCreateRequest(BaseModel):
    team_name: str = Field(..., title="Nombre del equipo", examples=["Halcones"])
    person_in_charge: str = Field(..., title="Persona a cargo", examples=["Luis"])
    category: Category = Field(..., title="Categoría", examples=["men"])


class TeamUpdateRequest(BaseModel):
    team_name: str | None = Field(None, title="Nombre del equipo")
    person_in_charge: str | None = Field(None, title="Persona a cargo")


class PlayerRequest(BaseModel):
    player_name: str = Field(..., title="Nombre del jugador", examples=["Jugador"])


def make_admin_router(
    admin_service: AdminService, roster_cache: RosterCache, admin_guard
) -> APIRouter:
    router = APIRouter(
        prefix="/admin", tags=["admin"], dependencies=[Depends(admin_guard)]
    )

    @router.get("/teams", response_model=list[TeamWithPlayersResponse])
    async def list_teams(
        category: Category | None = Query(None, description="Filtrar por categoría"),
    ):
        try:
            teams = await roster_cache.refresh()
        except DOMAIN_ERRORS as e:
            raise to_http_error(e)
        return [t.model_dump() for t in filter_by_category(teams, category)]

    @router.post(
        "/teams", response_model=TeamResponse, status_code=status.HTTP_201_CREATED
    )
    async def create_team(data: TeamCreateRequest):
        try:
            return await admin_service.create_team_manually(
                data.team_name, data.person_in_charge, data.category
            )
        except DOMAIN_ERRORS as e:
            raise to_http_error(e)

    @router.patch("/teams/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def edit_team(team_id: UUID, data: TeamUpdateRequest):
        try:
            await admin_service.edit_team_fields(
                team_id, data.team_name, data.person_in_charge
            )
        except DOMAIN_ERRORS as e:
            raise to_http_error(e)

    @router.delete("/teams/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_team(team_id: UUID):
        try:
            await admin_service.delete_team_by_id(team_id)
        except DOMAIN_ERRORS as e:
            raise to_http_error(e)

    @router.post(
        "/teams/{team_id}/players",
        response_model=PlayerResponse,
        status_code=status.HTTP_201_CREATED,
    )
    async def add_player(team_id: UUID, data: PlayerRequest):
        try:
            return await admin_service.add_player_to_team(team_id, data.player_name)
        except DOMAIN_ERRORS as e:
            raise to_http_error(e)

    @router.patch("/players/{player_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def edit_player(player_id: UUID, data: PlayerRequest):
        try:
            await admin_service.edit_player_name(player_id, data.player_name)
        except DOMAIN_ERRORS as e:
            raise to_http_error(e)

    @router.delete("/players/{player_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_player(player_id: UUID):
        try:
            await admin_service.delete_player_by_id(player_id)
        except DOMAIN_ERRORS as e:
            raise to_http_error(e)

    return router
