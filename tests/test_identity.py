"""
Tests for identity providers and configuration-driven selection.
"""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import httpx
import pytest
from supabase import AuthError

from mealink.config import Settings
from mealink.errors import AuthRequiredError, RemoteReadError
from mealink.identity import (
    DeviceIdentityProvider,
    RequestContextIdentityProvider,
    SessionIdentityProvider,
    StaticIdentityProvider,
    build_identity_provider,
    clear_request_context,
    set_request_context,
)

from conftest import USER_ID


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestSessionIdentity:
    def test_signed_in_user(self):
        client = MagicMock()
        client.auth.get_session = AsyncMock(return_value=MagicMock(user=MagicMock(id=UUID(USER_ID))))
        assert _run(SessionIdentityProvider(client).current_user_id()) == USER_ID

    def test_no_session(self):
        client = MagicMock()
        client.auth.get_session = AsyncMock(return_value=None)
        assert _run(SessionIdentityProvider(client).current_user_id()) is None

    def test_failed_refresh_requires_sign_in(self):
        """An expired refresh token surfaces as AuthRequiredError, not an auth-client error."""
        client = MagicMock()
        client.auth.get_session = AsyncMock(side_effect=AuthError("Invalid Refresh Token", None))

        with pytest.raises(AuthRequiredError) as exc:
            _run(SessionIdentityProvider(client).current_user_id())
        assert isinstance(exc.value.__cause__, AuthError)

    def test_unreachable_auth_server_is_read_error(self):
        client = MagicMock()
        client.auth.get_session = AsyncMock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(RemoteReadError):
            _run(SessionIdentityProvider(client).current_user_id())


class TestDeviceIdentity:
    def test_creates_and_persists_id(self, tmp_path):
        path = tmp_path / "nested" / "device_id"

        first = _run(DeviceIdentityProvider(path).current_user_id())
        second = _run(DeviceIdentityProvider(path).current_user_id())

        assert UUID(first)
        assert first == second
        assert path.read_text(encoding="utf-8") == first

    def test_replaces_malformed_id(self, tmp_path):
        path = tmp_path / "device_id"
        path.write_text("not-a-uuid", encoding="utf-8")

        device_id = _run(DeviceIdentityProvider(path).current_user_id())

        assert device_id != "not-a-uuid"
        assert path.read_text(encoding="utf-8") == device_id

    def test_replaces_unreadable_id(self, tmp_path, monkeypatch):
        path = tmp_path / "device_id"
        path.write_text(USER_ID, encoding="utf-8")

        def deny(self, *args, **kwargs):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "read_text", deny)
        device_id = _run(DeviceIdentityProvider(path).current_user_id())
        monkeypatch.undo()

        assert UUID(device_id)
        assert device_id != USER_ID
        assert path.read_text(encoding="utf-8") == device_id


class TestRequestContextIdentity:
    def test_reads_context(self):
        provider = RequestContextIdentityProvider()

        async def scenario():
            set_request_context(user_id=USER_ID)
            inside = await provider.current_user_id()
            clear_request_context()
            after = await provider.current_user_id()
            return inside, after

        assert _run(scenario()) == (USER_ID, None)


class TestBuildIdentityProvider:
    def test_session_mode_needs_client(self):
        config = _settings(identity_mode="session")
        assert build_identity_provider(config, None) is None
        assert isinstance(build_identity_provider(config, MagicMock()), SessionIdentityProvider)

    def test_device_mode(self, tmp_path):
        config = _settings(identity_mode="device", device_id_path=tmp_path / "device_id")
        assert isinstance(build_identity_provider(config, None), DeviceIdentityProvider)

    def test_dev_user_in_development(self):
        config = _settings(dev_user_id=USER_ID, mealink_env="development")
        provider = build_identity_provider(config, None)
        assert isinstance(provider, StaticIdentityProvider)
        assert _run(provider.current_user_id()) == USER_ID

    def test_dev_user_ignored_in_production(self):
        config = _settings(dev_user_id=USER_ID, mealink_env="production")
        assert build_identity_provider(config, None) is None
