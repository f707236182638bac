from fastapi import HTTPException, status

from roster.errors import (
    AuthError,
    IncompleteRosterError,
    InsufficientRoleError,
    InvalidRosterSizeError,
    RecordNotFoundError,
    RegistrationError,
    RegistrationFailedError,
    RepositoryError,
    RosterError,
    RosterTooLargeError,
    StoreRejectedError,
    StoreUnavailableError,
    ValidationError,
)

DOMAIN_ERRORS = (
    ValidationError,
    RosterError,
    RepositoryError,
    RegistrationError,
    AuthError,
)


def to_http_error(exc: Exception) -> HTTPException:
    """Translate a domain error into the HTTP error a client should see."""
    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Dato inválido ({exc.field}): {exc.message}",
        )
    if isinstance(exc, RosterTooLargeError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Límite alcanzado: máximo {exc.limit} jugadores",
        )
    if isinstance(exc, RosterError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Número de jugadores inválido",
        )
    if isinstance(exc, IncompleteRosterError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Todos los jugadores deben tener nombre",
        )
    if isinstance(exc, InvalidRosterSizeError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Número de jugadores inválido: {exc}",
        )
    if isinstance(exc, RegistrationFailedError):
        detail = "No se pudo registrar el equipo. Intente nuevamente."
        if exc.team is not None:
            detail = (
                f"El equipo {exc.team.id} fue creado sin jugadores. "
                "Contacte a un administrador."
            )
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
    if isinstance(exc, RegistrationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Datos de registro inválidos: {exc}",
        )
    if isinstance(exc, RecordNotFoundError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Equipo no encontrado"
            if exc.entity == "team"
            else "Jugador no encontrado",
        )
    if isinstance(exc, StoreRejectedError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="La base de datos rechazó la operación",
        )
    if isinstance(exc, StoreUnavailableError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Base de datos no disponible. Intente nuevamente.",
        )
    if isinstance(exc, InsufficientRoleError):
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No tienes permisos de administrador",
        )
    if isinstance(exc, AuthError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciales inválidas",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Error inesperado. Intente nuevamente.",
    )
