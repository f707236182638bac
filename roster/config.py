import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)


class Settings(BaseSettings):
    # ================= App =================
    APP_TITLE: str = "Team Roster Service"
    API_PREFIX: str = "/api/v1"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000
    APP_RELOAD: bool = False

    # ================= Logging =================
    LOG_LEVEL: str = "INFO"

    # ================= Postgres =================
    POSTGRES_USER: str = "roster_user"
    POSTGRES_PASSWORD: str = "roster_password"
    POSTGRES_DB: str = "roster_db"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_POOL_MIN_SIZE: int = 1
    POSTGRES_POOL_MAX_SIZE: int = 10
    POSTGRES_POOL_MAX_IDLE: float = 60.0
    APPLY_SCHEMA: bool = True

    # ================= Auth =================
    JWT_SECRET: str = "supersecret"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60
    ADMIN_ROLE: str = "admin"

    @property
    def POSTGRES_DSN(self) -> str:
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


def get_settings(env_file: str = ".env") -> Settings:
    env_path = Path(env_file)
    if env_path.exists():
        log.info(f"Loading configuration from {env_path}")
        return Settings(_env_file=env_path)
    log.info(f"Env file not found at {env_path}, using environment and defaults")
    return Settings(_env_file=None)
