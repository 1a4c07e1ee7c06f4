"""Tests for application startup and error translation."""

import os

import pytest
from unittest.mock import patch
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from api.app import create_app
from api.dependencies import get_container
from shared.config import Settings
from shared.exceptions import ConfigurationMissingError, ErrorKind


class TestStartup:
    def test_missing_configuration_aborts_startup(self, fake_db):
        """The server refuses to start, naming every missing variable."""
        with patch.dict(os.environ, {}, clear=True):
            incomplete = Settings(_env_file=None)

        with patch("api.app.get_settings", return_value=incomplete), \
             patch("api.app.init_database", return_value=fake_db) as mock_init:
            with pytest.raises(ConfigurationMissingError) as exc_info:
                with TestClient(create_app()):
                    pass

        assert exc_info.value.kind == ErrorKind.CONFIGURATION_MISSING
        assert "EMAIL_SERVER_HOST" in exc_info.value.missing
        assert "AUTH_SECRET" in exc_info.value.missing
        mock_init.assert_not_called()
        assert fake_db.calls == []

    def test_startup_wires_container_and_indexes(self, settings, fake_db):
        with patch("api.app.get_settings", return_value=settings), \
             patch("api.app.init_database", return_value=fake_db), \
             patch("api.app.close_database") as mock_close:
            with TestClient(create_app()) as client:
                container = get_container()
                assert container.database is fake_db
                assert client.get("/api/ready").status_code == 200

            mock_close.assert_called_once()

        assert fake_db["users"].indexes["unique_email"]["unique"] is True
        assert fake_db["stats"].indexes["unique_user_id"]["unique"] is True

    def test_startup_reconciles_when_enabled(self, settings, fake_db):
        settings.reconcile_stats_on_startup = True
        fake_db["users"].docs.append({"_id": ObjectId(), "email": "old@example.com"})

        with patch("api.app.get_settings", return_value=settings), \
             patch("api.app.init_database", return_value=fake_db), \
             patch("api.app.close_database"):
            with TestClient(create_app()):
                pass

        assert len(fake_db["stats"].docs) == 1
        assert fake_db["stats"].docs[0]["ai_credits"] == 240

    def test_index_failure_aborts_startup(self, settings, fake_db):
        """Without the unique indexes the server refuses to start."""
        fake_db["users"].fail_with["create_index"] = ServerSelectionTimeoutError("no servers")

        with patch("api.app.get_settings", return_value=settings), \
             patch("api.app.init_database", return_value=fake_db), \
             patch("api.app.close_database") as mock_close:
            with pytest.raises(ServerSelectionTimeoutError):
                with TestClient(create_app()):
                    pass

            mock_close.assert_called_once()

        with pytest.raises(RuntimeError, match="not initialized"):
            get_container()

    def test_reconcile_failure_does_not_abort(self, settings, fake_db):
        settings.reconcile_stats_on_startup = True
        fake_db["users"].docs.append({"_id": ObjectId(), "email": "old@example.com"})
        fake_db["stats"].fail_with["insert_one"] = ServerSelectionTimeoutError("no servers")

        with patch("api.app.get_settings", return_value=settings), \
             patch("api.app.init_database", return_value=fake_db), \
             patch("api.app.close_database"):
            with TestClient(create_app()) as client:
                assert client.get("/api/health").status_code == 200

        assert fake_db["stats"].docs == []


class TestErrorHandlers:
    def test_unexpected_error_is_generic_500(self, container):
        app = create_app()

        @app.get("/api/boom")
        async def boom():
            raise KeyError("secret internal detail")

        client = TestClient(app, raise_server_exceptions=False)
        response = client.get("/api/boom")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}
        assert "secret" not in response.text
