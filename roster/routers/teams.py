from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Query, status
from pydantic import BaseModel, Field

from roster.errors import RegistrationError, RepositoryError
from roster.models import Category
from roster.routers.errors import to_http_error
from roster.services.registration import RegistrationService
from roster.services.roster_cache import RosterCache, filter_by_category, summarize


class TeamResponse(BaseModel):
    id: UUID = Field(..., title="ID del equipo")
    team_name: str = Field(..., title="Nombre del equipo")
    person_in_charge: str = Field(..., title="Persona a cargo")
    category: Category = Field(..., title="Categoría")
    player_count: int = Field(..., title="Número de jugadores")
    created_at: datetime = Field(..., title="Fecha de registro")


class SummaryResponse(BaseModel):
    total: int = Field(..., title="Equipos en total")
    men: int = Field(..., title="Equipos masculinos")
    women: int = Field(..., title="Equipos femeninos")


class RegistrationRequest(BaseModel):
    category: Category = Field(..., title="Categoría", examples=["men"])
    team_name: str = Field(
        ..., title="Nombre del equipo", examples=["Los Campeones FC"]
    )
    person_in_charge: str = Field(
        ..., title="Persona a cargo", examples=["Juan Pérez"]
    )
    player_names: list[str] = Field(
        ...,
        title="Jugadores",
        description="Nombres de los jugadores en orden de inscripción",
        examples=[["Ana", "Beatriz", "Clara"]],
    )


def make_teams_router(
    roster_cache: RosterCache, registration_service: RegistrationService
) -> APIRouter:
    router = APIRouter(prefix="/teams", tags=["teams"])

    @router.get("", response_model=list[TeamResponse], summary="Equipos registrados")
    async def list_teams(
        category: Category | None = Query(None, description="Filtrar por categoría"),
    ):
        try:
            teams = await roster_cache.snapshot()
        except RepositoryError as e:
            raise to_http_error(e)
        return [
            t.model_dump(exclude={"players"})
            for t in filter_by_category(teams, category)
        ]

    @router.get(
        "/summary", response_model=SummaryResponse, summary="Totales por categoría"
    )
    async def teams_summary():
        try:
            teams = await roster_cache.snapshot()
        except RepositoryError as e:
            raise to_http_error(e)
        return summarize(teams).model_dump()

    @router.post(
        "/register",
        response_model=TeamResponse,
        status_code=status.HTTP_201_CREATED,
        summary="Registrar equipo",
    )
    async def register_team(data: RegistrationRequest):
        try:
            return await registration_service.register_team(
                data.category, data.team_name, data.person_in_charge, data.player_names
            )
        except RegistrationError as e:
            raise to_http_error(e)

    return router
