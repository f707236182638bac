import json
import logging

import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from roster.middlewares.logging import LoggingMiddleware, redact


class LogCaptureHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def log_handler():
    handler = LogCaptureHandler()
    logger = logging.getLogger("roster.http")
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    yield handler
    logger.removeHandler(handler)


@pytest.fixture
def app():
    app = FastAPI()
    app.add_middleware(LoggingMiddleware)

    @app.get("/test")
    async def test_endpoint():
        return JSONResponse({"hello": "world"})

    @app.post("/login")
    async def login(data: dict):
        return JSONResponse({"email": data["email"]})

    return app


def test_middleware_adds_request_id(app, log_handler):
    client = TestClient(app)
    response = client.get("/test")

    assert "X-Request-ID" in response.headers
    request_id = response.headers["X-Request-ID"]
    assert len(request_id) == 36  # UUID

    assert len(log_handler.records) == 1
    log_json = json.loads(log_handler.records[0].getMessage())
    assert log_json["request_id"] == request_id
    assert log_json["method"] == "GET"
    assert log_json["path"] == "/test"
    assert log_json["status_code"] == 200
    assert "duration_ms" in log_json
    assert log_json["request_body"] is None


def test_middleware_redacts_passwords(app, log_handler):
    client = TestClient(app)
    response = client.post(
        "/login", json={"email": "admin@example.com", "password": "secret"}
    )

    assert response.status_code == 200
    assert response.json() == {"email": "admin@example.com"}
    log_json = json.loads(log_handler.records[0].getMessage())
    assert log_json["request_body"] == {
        "email": "admin@example.com",
        "password": "***",
    }


def test_redact_non_json():
    assert redact(None) is None
    assert redact("plain text") == "plain text"
    assert redact("[1, 2]") == [1, 2]
