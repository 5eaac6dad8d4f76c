"""Unit tests for accounts.core.config: Settings validation."""

import unittest

from pydantic import ValidationError

from accounts.core.config import Settings


def _settings(**overrides: object) -> Settings:
    """Build Settings without reading a .env file."""
    return Settings(_env_file=None, **overrides)


class TestDefaults(unittest.TestCase):
    def test_defaults_are_valid(self) -> None:
        s = _settings()
        self.assertEqual(s.ADD_USER_WRITE_CONCERN_W, 2)
        self.assertEqual(s.API_V1_PREFIX, "/api/v1")


class TestMongoUri(unittest.TestCase):
    """MONGODB_URI must be a mongodb:// or mongodb+srv:// URL."""

    def test_srv_accepted_and_stripped(self) -> None:
        s = _settings(MONGODB_URI="  mongodb+srv://cluster0.example.net  ")
        self.assertEqual(s.MONGODB_URI, "mongodb+srv://cluster0.example.net")

    def test_rejects_other_scheme(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(MONGODB_URI="postgresql://localhost:5432/mflix")

    def test_rejects_empty(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(MONGODB_URI="  ")


class TestNamespace(unittest.TestCase):
    """MFLIX_NS must be a usable database name."""

    def test_rejects_empty(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(MFLIX_NS="")

    def test_rejects_dot(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(MFLIX_NS="sample.mflix")


class TestLimits(unittest.TestCase):
    def test_timeout_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(MONGODB_TIMEOUT_MS=0)
        with self.assertRaises(ValidationError):
            _settings(MONGODB_TIMEOUT_MS=60001)

    def test_write_concern(self) -> None:
        self.assertEqual(_settings(ADD_USER_WRITE_CONCERN_W="majority").ADD_USER_WRITE_CONCERN_W, "majority")
        self.assertEqual(_settings(ADD_USER_WRITE_CONCERN_W=1).ADD_USER_WRITE_CONCERN_W, 1)
        with self.assertRaises(ValidationError):
            _settings(ADD_USER_WRITE_CONCERN_W=0)
        with self.assertRaises(ValidationError):
            _settings(ADD_USER_WRITE_CONCERN_W="all")
