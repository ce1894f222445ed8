"""Unit tests for application wiring: lifecycle, health and logging."""

import logging
from unittest.mock import Mock, patch

from fastapi.testclient import TestClient
from loguru import logger

from src.backend.api.http.app import app
from src.backend.api.utils.app_startup import InterceptHandler
from src.backend.runtime.init_db import init_db


class TestLifecycle:
    def test_health_before_startup(self):
        """Without startup there is no backend to report on."""
        client = TestClient(app)
        app_dependencies = getattr(app.state, "app_dependencies", None)
        try:
            if hasattr(app.state, "app_dependencies"):
                del app.state.app_dependencies
            response = client.get("/health")
        finally:
            if app_dependencies is not None:
                app.state.app_dependencies = app_dependencies

        assert response.status_code == 200
        assert response.json() == {"status": "starting"}

    def test_startup_selects_backend(self):
        """Startup builds the configured backend and shutdown closes it."""
        persistence = Mock()
        persistence.name = "relational"
        persistence.health_check.return_value = True

        with patch("src.backend.api.http.app.create_persistence", return_value=persistence):
            with TestClient(app) as client:
                response = client.get("/health")

        assert response.json() == {"status": "ok", "backend": "relational"}
        persistence.initialize.assert_called_once()
        persistence.close.assert_called_once()

    def test_security_headers(self):
        response = TestClient(app).get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "X-Request-ID" in response.headers

    def test_request_id_is_echoed(self):
        response = TestClient(app).get("/health", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"


class TestInitDb:
    def test_initializes_and_closes(self):
        persistence = Mock()
        persistence.name = "document"

        with patch("src.backend.runtime.init_db.create_persistence", return_value=persistence):
            init_db()

        persistence.initialize.assert_called_once()
        persistence.close.assert_called_once()


class TestInterceptHandler:
    def test_stdlib_records_reach_loguru(self):
        messages: list[str] = []
        sink_id = logger.add(lambda message: messages.append(message.record["message"]))
        try:
            record = logging.LogRecord(
                "some.library", logging.WARNING, __file__, 1, "hello %s", ("world",), None
            )
            InterceptHandler().emit(record)
        finally:
            logger.remove(sink_id)

        assert messages == ["hello world"]

    def test_access_log_is_dropped(self):
        messages: list[str] = []
        sink_id = logger.add(lambda message: messages.append(message.record["message"]))
        try:
            record = logging.LogRecord(
                "uvicorn.access", logging.INFO, __file__, 1, "GET /", None, None
            )
            InterceptHandler().emit(record)
        finally:
            logger.remove(sink_id)

        assert messages == []
