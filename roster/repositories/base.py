import asyncio
import functools
import logging

import asyncpg

from roster.errors import (
    RecordNotFoundError,
    RepositoryError,
    StoreRejectedError,
    StoreUnavailableError,
)

log: logging.Logger = logging.getLogger(__name__)


def translate_store_errors(entity: str):
    """Map asyncpg / network failures of a repository coroutine to RepositoryError."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except RepositoryError:
                raise
            except asyncpg.CannotConnectNowError as e:
                log.error(f"{func.__qualname__}: store unavailable: {e}")
                raise StoreUnavailableError(str(e)) from e
            except asyncpg.ForeignKeyViolationError as e:
                log.warning(f"{func.__qualname__}: missing referenced {entity}: {e}")
                raise RecordNotFoundError(entity) from e
            except asyncpg.PostgresError as e:
                log.warning(f"{func.__qualname__}: store rejected request: {e}")
                raise StoreRejectedError(str(e)) from e
            except (asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
                log.error(f"{func.__qualname__}: store unavailable: {e}")
                raise StoreUnavailableError(str(e)) from e

        return wrapper

    return decorator


def affected_rows(status: str) -> int:
    # asyncpg returns command tags such as "UPDATE 1" or "DELETE 0"
    try:
        return int(status.rsplit(" ", 1)[-1])
    except ValueError:
        return 0
