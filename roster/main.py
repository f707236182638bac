import logging
from contextlib import asynccontextmanager

import asyncpg
import uvicorn
from fastapi import FastAPI

from roster.config import Settings, get_settings
from roster.middlewares.logging import LoggingMiddleware
from roster.repositories.player import make_player_repository
from roster.repositories.schema import apply_schema
from roster.repositories.team import make_team_repository
from roster.repositories.user import make_user_repository
from roster.routers.admin import make_admin_router
from roster.routers.auth import make_admin_guard, make_auth_router
from roster.routers.teams import make_teams_router
from roster.services.admin import make_admin_service
from roster.services.auth import make_auth_service
from roster.services.registration import make_registration_service
from roster.services.roster_cache import make_roster_cache


# ------------------ App Factory ------------------
def create_app(settings: Settings) -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    log = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ---------- STARTUP ----------
        pool = await asyncpg.create_pool(
            dsn=settings.POSTGRES_DSN,
            min_size=settings.POSTGRES_POOL_MIN_SIZE,
            max_size=settings.POSTGRES_POOL_MAX_SIZE,
            max_inactive_connection_lifetime=settings.POSTGRES_POOL_MAX_IDLE,
        )
        app.state.db_pool = pool
        if settings.APPLY_SCHEMA:
            await apply_schema(pool)

        team_repo = make_team_repository(pool)
        player_repo = make_player_repository(pool)
        user_repo = make_user_repository(pool)

        roster_cache = make_roster_cache(team_repo, player_repo)
        registration_service = make_registration_service(
            team_repo, player_repo, roster_cache
        )
        admin_service = make_admin_service(team_repo, player_repo, roster_cache)
        auth_service = make_auth_service(
            user_repository=user_repo,
            jwt_secret=settings.JWT_SECRET,
            jwt_algorithm=settings.JWT_ALGORITHM,
            token_expire_minutes=settings.JWT_EXPIRE_MINUTES,
        )
        admin_guard = make_admin_guard(auth_service, settings.ADMIN_ROLE)

        app.include_router(
            make_auth_router(auth_service, settings.ADMIN_ROLE),
            prefix=settings.API_PREFIX,
        )
        app.include_router(
            make_teams_router(roster_cache, registration_service),
            prefix=settings.API_PREFIX,
        )
        app.include_router(
            make_admin_router(admin_service, roster_cache, admin_guard),
            prefix=settings.API_PREFIX,
        )
        log.info("[*] Roster service started")

        try:
            yield
        finally:
            # ---------- SHUTDOWN ----------
            await pool.close()
            log.info("[*] Roster service stopped")

    app = FastAPI(title=settings.APP_TITLE, lifespan=lifespan)
    app.add_middleware(LoggingMiddleware)

    @app.get("/health")
    async def health():
        try:
            async with app.state.db_pool.acquire() as conn:
                await conn.execute("SELECT 1")
            return {"status": "ok"}
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            log.warning(f"Health check failed: {e}")
            return {"status": "fail"}

    return app


# ------------------ Uvicorn Runner ------------------
def run_uvicorn(app: FastAPI, settings: Settings):
    uvicorn.run(
        app,
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.APP_RELOAD,
    )


# ------------------ Main ------------------
def main():
    settings = get_settings()
    app = create_app(settings)
    run_uvicorn(app, settings)


if __name__ == "__main__":
    main()
