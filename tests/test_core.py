"""Tests for the core modules: exceptions, base connection, and credentials."""

import json
from unittest.mock import patch

import pytest

from taguchimail.exceptions import (
    ConfigurationError,
    ConnectionError,
    CredentialError,
    InvalidFieldError,
    QueryError,
    ResponseError,
    TaguchiMailError,
)
from taguchimail.core.base import BaseConnection
from taguchimail.core.credentials import CredentialManager


# ── Helpers ──────────────────────────────────────────────────────────


class ConcreteConnection(BaseConnection):
    """Minimal concrete subclass of BaseConnection for testing."""

    def connect(self) -> None:
        self._is_connected = True

    def disconnect(self) -> None:
        self._is_connected = False

    def health_check(self) -> bool:
        return self._is_connected


def _make_manager():
    """Create a fresh CredentialManager instance, bypassing the singleton."""
    mgr = object.__new__(CredentialManager)
    mgr._credentials_cache = {}
    mgr._env_loaded = True  # skip dotenv reload
    return mgr


# ── Exceptions ───────────────────────────────────────────────────────


class TestExceptions:
    """Test the custom exception hierarchy."""

    @pytest.mark.parametrize(
        "exc_class",
        [
            CredentialError,
            ConnectionError,
            ConfigurationError,
            QueryError,
            ResponseError,
            InvalidFieldError,
        ],
    )
    def test_all_exceptions_inherit_from_base(self, exc_class):
        assert issubclass(exc_class, TaguchiMailError)

    def test_connection_error_does_not_shadow_builtin_hierarchy(self):
        """The library ConnectionError is caught via TaguchiMailError, not OSError."""
        assert not issubclass(ConnectionError, OSError)

    def test_response_error_keeps_body(self):
        err = ResponseError("bad", body="<html>")
        assert str(err) == "bad"
        assert err.body == "<html>"

    def test_response_error_body_defaults_to_none(self):
        assert ResponseError("bad").body is None

    def test_invalid_field_error_keeps_field(self):
        err = InvalidFieldError("nope", field="status")
        assert err.field == "status"

    def test_catch_subclass_via_base(self):
        with pytest.raises(TaguchiMailError):
            raise QueryError("bad operator")


# ── BaseConnection ───────────────────────────────────────────────────


class TestBaseConnection:
    """Test the abstract BaseConnection class."""

    def test_cannot_instantiate_directly(self):
        with pytest.raises(TypeError, match="abstract"):
            BaseConnection()

    def test_is_connected_lifecycle(self):
        conn = ConcreteConnection()
        assert conn.is_connected() is False
        conn.connect()
        assert conn.is_connected() is True
        conn.disconnect()
        assert conn.is_connected() is False

    def test_context_manager_calls_connect_and_disconnect(self):
        conn = ConcreteConnection()
        with conn as c:
            assert c is conn
            assert c.is_connected() is True
        assert conn.is_connected() is False

    def test_context_manager_disconnects_on_exception(self):
        conn = ConcreteConnection()
        with pytest.raises(ValueError):
            with conn:
                raise ValueError("boom")
        assert conn.is_connected() is False

    def test_repr(self):
        conn = ConcreteConnection()
        assert repr(conn) == "<ConcreteConnection status=disconnected>"
        conn.connect()
        assert repr(conn) == "<ConcreteConnection status=connected>"


# ── CredentialManager ────────────────────────────────────────────────

ACCOUNT = {"username": "me@example.org", "password": "secret"}


class TestCredentialManager:
    """Test the CredentialManager class."""

    def test_singleton_pattern(self):
        assert CredentialManager() is CredentialManager()

    def test_get_account_default_name(self):
        with patch.dict(
            "os.environ", {"TAGUCHI_CREDENTIALS_PASSWORD": json.dumps(ACCOUNT)}
        ):
            cm = _make_manager()
            assert cm.get_account() == ACCOUNT

    def test_get_account_named(self):
        with patch.dict(
            "os.environ",
            {"TAGUCHI_STAGING_CREDENTIALS_PASSWORD": json.dumps(ACCOUNT)},
            clear=True,
        ):
            cm = _make_manager()
            assert cm.get_account("TAGUCHI_STAGING_CREDENTIALS") == ACCOUNT

    def test_missing_variable(self):
        with patch.dict("os.environ", {}, clear=True):
            cm = _make_manager()
            with pytest.raises(CredentialError, match="TAGUCHI_CREDENTIALS_PASSWORD"):
                cm.get_account()

    def test_invalid_json(self):
        with patch.dict("os.environ", {"TAGUCHI_CREDENTIALS_PASSWORD": "not-json{"}):
            cm = _make_manager()
            with pytest.raises(CredentialError, match="not valid JSON") as exc:
                cm.get_account()
        assert isinstance(exc.value.__cause__, json.JSONDecodeError)

    def test_missing_keys(self):
        with patch.dict(
            "os.environ",
            {"TAGUCHI_CREDENTIALS_PASSWORD": json.dumps({"username": "me"})},
        ):
            cm = _make_manager()
            with pytest.raises(CredentialError, match="password"):
                cm.get_account()

    def test_rejects_non_object(self):
        with patch.dict(
            "os.environ", {"TAGUCHI_CREDENTIALS_PASSWORD": json.dumps(["a", "b"])}
        ):
            cm = _make_manager()
            with pytest.raises(CredentialError, match="valid JSON object"):
                cm.get_account()

    def test_caching_returns_same_value(self):
        with patch.dict(
            "os.environ", {"TAGUCHI_CREDENTIALS_PASSWORD": json.dumps(ACCOUNT)}
        ):
            cm = _make_manager()
            first = cm.get_account()
        with patch.dict("os.environ", {}, clear=True):
            assert cm.get_account() is first

    def test_clear_cache_then_fetch_re_reads_env(self):
        rotated = {"username": "me@example.org", "password": "rotated"}
        with patch.dict(
            "os.environ", {"TAGUCHI_CREDENTIALS_PASSWORD": json.dumps(ACCOUNT)}
        ):
            cm = _make_manager()
            assert cm.get_account()["password"] == "secret"
        cm.clear_cache()
        with patch.dict(
            "os.environ", {"TAGUCHI_CREDENTIALS_PASSWORD": json.dumps(rotated)}
        ):
            assert cm.get_account()["password"] == "rotated"
