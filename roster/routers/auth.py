from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException, status
from pydantic import BaseModel, Field

from roster.errors import AuthError, InsufficientRoleError, RepositoryError
from roster.routers.errors import to_http_error
from roster.services.auth import AuthService


class LoginRequest(BaseModel):
    email: str = Field(
        ...,
        examples=["admin@example.com"],
        title="Correo",
        description="Correo del administrador",
    )
    password: str = Field(
        ...,
        title="Contraseña",
        description="Contraseña del administrador",
    )


class SessionResponse(BaseModel):
    access_token: str = Field(..., title="Token de acceso", description="JWT")
    token_type: str = Field("bearer", title="Tipo de token")
    user_id: UUID = Field(..., title="ID de usuario")
    email: str = Field(..., title="Correo")
    expires_at: datetime = Field(..., title="Expira")


class UserResponse(BaseModel):
    user_id: UUID = Field(..., title="ID de usuario")
    email: str = Field(..., title="Correo")
    is_admin: bool = Field(False, title="Es administrador")


def bearer_token(authorization: str | None = Header(None)) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Falta el encabezado Bearer",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return authorization.split(" ", 1)[1]


def make_admin_guard(auth_service: AuthService, role: str = "admin"):
    """Build a dependency that only lets through users holding ``role``."""

    async def require_admin(token: str = Depends(bearer_token)) -> dict:
        try:
            user = await auth_service.get_current_user(token)
            await auth_service.require_role(user["user_id"], role)
        except (AuthError, RepositoryError) as e:
            raise to_http_error(e)
        return user

    return require_admin


def make_auth_router(auth_service: AuthService, role: str = "admin") -> APIRouter:
    router = APIRouter(prefix="/auth", tags=["auth"])

    @router.post("/login", response_model=SessionResponse)
    async def login(data: LoginRequest):
        try:
            return await auth_service.sign_in(data.email, data.password)
        except (AuthError, RepositoryError) as e:
            raise to_http_error(e)

    @router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
    async def logout(token: str = Depends(bearer_token)):
        try:
            auth_service.sign_out(token)
        except AuthError as e:
            raise to_http_error(e)

    @router.get("/me", response_model=UserResponse)
    async def me(token: str = Depends(bearer_token)):
        try:
            user = await auth_service.get_current_user(token)
        except (AuthError, RepositoryError) as e:
            raise to_http_error(e)
        try:
            await auth_service.require_role(user["user_id"], role)
            is_admin = True
        except InsufficientRoleError:
            is_admin = False
        except RepositoryError as e:
            raise to_http_error(e)
        return {
            "user_id": user["user_id"],
            "email": user["email"],
            "is_admin": is_admin,
        }

    return router
