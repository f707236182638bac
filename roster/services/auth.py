import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Iterable
from uuid import UUID

import bcrypt
import jwt

from roster.errors import (
    InsufficientRoleError,
    InvalidCredentialsError,
    InvalidTokenError,
    UserAlreadyExistsError,
)
from roster.models import Session
from roster.repositories.user import UserRepository

log: logging.Logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        user_repository: UserRepository,
        jwt_secret: str,
        jwt_algorithm: str,
        token_expire_minutes: int,
    ):
        self.user_repository = user_repository
        self.jwt_secret = jwt_secret
        self.jwt_algorithm = jwt_algorithm
        self.token_expire_minutes = token_expire_minutes
        # jti -> exp (unix seconds) of signed-out tokens
        self._revoked: dict[str, int] = {}

    async def create_user(
        self, email: str, password: str, roles: Iterable[str] = ()
    ) -> dict:
        email = email.strip().lower()
        roles = list(roles)
        existing = await self.user_repository.get_user_by_email(email)
        if existing:
            raise UserAlreadyExistsError(email)
        hashed_password = bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()
        user = await self.user_repository.create_user(email, hashed_password)
        for role in roles:
            await self.user_repository.grant_role(user["user_id"], role)
        log.info(f"Created user {user['user_id']} with roles {roles}")
        return user

    async def sign_in(self, email: str, password: str) -> Session:
        user = await self.user_repository.get_user_by_email(email.strip().lower())
        if not user:
            raise InvalidCredentialsError
        if not bcrypt.checkpw(password.encode(), user["password_hash"].encode()):
            raise InvalidCredentialsError
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=self.token_expire_minutes
        )
        payload = {
            "sub": str(user["user_id"]),
            "email": user["email"],
            "jti": uuid.uuid4().hex,
            "exp": expire,
        }
        token = jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)
        return Session(
            access_token=token,
            user_id=user["user_id"],
            email=user["email"],
            expires_at=expire,
        )

    def sign_out(self, token: str) -> None:
        payload = self._decode(token)
        self.prune_revoked()
        self._revoked[payload["jti"]] = payload["exp"]
        log.info(f"User {payload['sub']} signed out")

    def prune_revoked(self, now: datetime | None = None) -> int:
        """Forget revoked tokens that have expired anyway. Returns how many."""
        cutoff = (now or datetime.now(timezone.utc)).timestamp()
        expired = [jti for jti, exp in self._revoked.items() if exp <= cutoff]
        for jti in expired:
            del self._revoked[jti]
        return len(expired)

    async def get_current_user(self, token: str) -> dict:
        payload = self._decode(token)
        user = await self.user_repository.get_user_by_id(UUID(payload["sub"]))
        if not user:
            raise InvalidTokenError("Unknown user")
        return user

    async def require_role(self, user_id: UUID, role: str = "admin") -> None:
        if not await self.user_repository.has_role(user_id, role):
            raise InsufficientRoleError(role)

    def _decode(self, token: str) -> dict:
        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                options={"require": ["sub", "jti", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e)) from e
        if payload["jti"] in self._revoked:
            raise InvalidTokenError("Token has been revoked")
        return payload


def make_auth_service(
    user_repository: UserRepository,
    jwt_secret: str,
    jwt_algorithm: str,
    token_expire_minutes: int,
) -> AuthService:
    return AuthService(
        user_repository=user_repository,
        jwt_secret=jwt_secret,
        jwt_algorithm=jwt_algorithm,
        token_expire_minutes=token_expire_minutes,
    )
