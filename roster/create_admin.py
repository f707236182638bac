import argparse
import asyncio
import getpass
import logging

import asyncpg

from roster.config import get_settings
from roster.errors import RepositoryError, UserAlreadyExistsError
from roster.repositories.schema import apply_schema
from roster.repositories.user import make_user_repository
from roster.services.auth import AuthService, make_auth_service

logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
log = logging.getLogger("roster_create_admin")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Create a user allowed to use the admin panel"
    )
    parser.add_argument("--email", type=str, required=True, help="Admin email")
    parser.add_argument(
        "--password",
        type=str,
        default=None,
        help="Admin password (prompted when omitted)",
    )
    parser.add_argument(
        "--env_file", type=str, default=".env", help="Path to the .env file"
    )
    return parser.parse_args(argv)


async def create_admin(
    auth_service: AuthService, email: str, password: str, role: str = "admin"
) -> dict:
    user = await auth_service.create_user(email, password, roles=[role])
    log.info(f"Admin {user['email']} created with id {user['user_id']}")
    return user


async def run(args) -> int:
    settings = get_settings(args.env_file)
    password = args.password or getpass.getpass("Password: ")

    pool = await asyncpg.create_pool(dsn=settings.POSTGRES_DSN, min_size=1, max_size=2)
    try:
        if settings.APPLY_SCHEMA:
            await apply_schema(pool)
        auth_service = make_auth_service(
            user_repository=make_user_repository(pool),
            jwt_secret=settings.JWT_SECRET,
            jwt_algorithm=settings.JWT_ALGORITHM,
            token_expire_minutes=settings.JWT_EXPIRE_MINUTES,
        )
        await create_admin(auth_service, args.email, password, settings.ADMIN_ROLE)
    except UserAlreadyExistsError:
        log.error(f"User {args.email} already exists")
        return 1
    except RepositoryError as e:
        log.error(f"Could not create admin: {e}")
        return 1
    finally:
        await pool.close()
    return 0


def main():
    raise SystemExit(asyncio.run(run(parse_args())))


if __name__ == "__main__":
    main()
