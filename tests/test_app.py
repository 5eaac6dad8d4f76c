"""Tests for the FastAPI wiring: startup lifespan, health endpoint and DAO dependency."""

import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi import HTTPException
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from accounts.core.database import get_users_dao
from accounts.dao.users import UsersDAO
from accounts.main import app
from mongo_fakes import FakeClient, fake_settings


def _clear_state() -> None:
    for attr in ("mongo_client", "users_dao"):
        if hasattr(app.state, attr):
            delattr(app.state, attr)


class TestLifespan(unittest.TestCase):
    """Startup creates the client, injects the DAO and creates indexes; shutdown closes the client."""

    def tearDown(self) -> None:
        _clear_state()

    @patch("accounts.main.create_client")
    def test_startup_initializes_dao(self, mock_create_client: MagicMock) -> None:
        client = FakeClient()
        mock_create_client.return_value = client
        with TestClient(app) as http:
            dao = app.state.users_dao
            self.assertIsInstance(dao, UsersDAO)
            self.assertTrue(dao.is_initialized)
            self.assertIs(app.state.mongo_client, client)
            self.assertEqual(http.get("/").json(), {"message": "mflix accounts"})
        users = next(iter(client.databases.values())).collections["users"]
        self.assertIn("email", users.unique_keys)
        client.close.assert_awaited_once()


class TestHealth(unittest.TestCase):
    """GET /api/v1/health/ reports database connectivity from a ping."""

    def setUp(self) -> None:
        _clear_state()
        self.http = TestClient(app)

    def tearDown(self) -> None:
        _clear_state()

    def test_connected(self) -> None:
        app.state.mongo_client = FakeClient()
        resp = self.http.get("/api/v1/health/")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")
        self.assertEqual(body["users_store"], "unavailable")
        app.state.mongo_client.admin.command.assert_awaited_once_with("ping")

    def test_disconnected_on_ping_failure(self) -> None:
        client = FakeClient()
        client.admin.command = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
        app.state.mongo_client = client
        resp = self.http.get("/api/v1/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["database"], "disconnected")

    def test_disconnected_without_client(self) -> None:
        resp = self.http.get("/api/v1/health/")
        self.assertEqual(resp.json()["database"], "disconnected")

    def test_reports_ready_store(self) -> None:
        client = FakeClient()
        dao = UsersDAO(fake_settings())
        dao.inject_db(client)
        app.state.mongo_client = client
        app.state.users_dao = dao
        body = self.http.get("/api/v1/health/").json()
        self.assertEqual(body["users_store"], "ready")
        self.assertTrue(body["namespace"])


class TestGetUsersDao(unittest.TestCase):
    """get_users_dao hands out the startup DAO, or 503 when it is not ready."""

    def _request(self, dao: object) -> MagicMock:
        request = MagicMock()
        request.app.state.users_dao = dao
        return request

    def test_returns_initialized_dao(self) -> None:
        dao = UsersDAO(fake_settings())
        dao.inject_db(FakeClient())
        self.assertIs(get_users_dao(self._request(dao)), dao)

    def test_uninitialized_dao_is_503(self) -> None:
        with self.assertRaises(HTTPException) as ctx:
            get_users_dao(self._request(UsersDAO(fake_settings())))
        self.assertEqual(ctx.exception.status_code, 503)

    def test_missing_dao_is_503(self) -> None:
        with self.assertRaises(HTTPException) as ctx:
            get_users_dao(self._request(None))
        self.assertEqual(ctx.exception.status_code, 503)
