import json
import logging
import time
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("roster.http")

REDACTED_FIELDS = {"password"}


def redact(body: str | None):
    """Parse a JSON body and mask credential fields; non-JSON bodies pass through."""
    if not body:
        return body
    try:
        data = json.loads(body)
    except ValueError:
        return body
    if isinstance(data, dict):
        return {k: "***" if k in REDACTED_FIELDS else v for k, v in data.items()}
    return data


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.time()

        try:
            body_bytes = await request.body()
            request_body = body_bytes.decode("utf-8") if body_bytes else None
        except UnicodeDecodeError:
            request_body = None

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000

        log_data = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime()),
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
            "request_body": redact(request_body),
        }

        if response.status_code >= 500:
            logger.error(json.dumps(log_data, ensure_ascii=False))
        else:
            logger.info(json.dumps(log_data, ensure_ascii=False))

        response.headers["X-Request-ID"] = request_id
        return response
