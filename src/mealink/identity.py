"""
Mealink - Identity Providers.

Every provider answers one question: who is acting right now?
`current_user_id()` returns None when nobody is signed in.

Providers:
- SessionIdentityProvider: signed-in Supabase user (default)
- DeviceIdentityProvider: anonymous device UUID persisted locally
- RequestContextIdentityProvider: user id set on the current request context
- StaticIdentityProvider: fixed id (CLI dev user, tests)
"""

import logging
from contextvars import ContextVar
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable
from uuid import UUID, uuid4

import httpx
from supabase import AsyncClient, AuthError

from mealink.config import Settings
from mealink.errors import AuthRequiredError, RemoteReadError

logger = logging.getLogger(__name__)


@runtime_checkable
class IdentityProvider(Protocol):
    async def current_user_id(self) -> str | None:
        """Return the acting user/device id, or None if unauthenticated."""
        ...


class SessionIdentityProvider:
    """Reads the user id from the Supabase auth session."""

    def __init__(self, client: AsyncClient):
        self._client = client

    async def current_user_id(self) -> str | None:
        """
        Raises:
            AuthRequiredError: the stored session could not be refreshed
            RemoteReadError: the auth server could not be reached
        """
        try:
            session = await self._client.auth.get_session()
        except AuthError as e:
            logger.warning(f"Session refresh failed: {e}")
            raise AuthRequiredError() from e
        except httpx.HTTPError as e:
            logger.warning(f"Auth server unreachable: {e}")
            raise RemoteReadError(f"Session lookup failed: {e}") from e

        if session is None or session.user is None:
            return None
        return str(session.user.id)


class DeviceIdentityProvider:
    """
    Device-local identity.

    The UUID is read from `path`. If the file is missing, unreadable or
    malformed, a new one is generated and written there.
    """

    def __init__(self, path: Path):
        self._path = path
        self._cached: str | None = None

    async def current_user_id(self) -> str | None:
        if self._cached is None:
            self._cached = self._load_or_create()
        return self._cached

    def _load_or_create(self) -> str:
        if self._path.exists():
            try:
                stored = self._path.read_text(encoding="utf-8").strip()
                return str(UUID(stored))
            except OSError as e:
                logger.warning(f"Cannot read device id from {self._path}: {e}")
            except ValueError:
                logger.warning(f"Ignoring malformed device id in {self._path}")

        new_id = str(uuid4())
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(new_id, encoding="utf-8")
        logger.info(f"Created device id at {self._path}")
        return new_id


# Context variable for the current request's user
_user_id: ContextVar[Optional[str]] = ContextVar("user_id", default=None)


def set_request_context(user_id: str | None = None):
    """
    Set the acting user for the current request/task.

    Call this at the start of request handling.
    """
    _user_id.set(user_id)


def clear_request_context():
    """Clear the request context (call at end of request)."""
    _user_id.set(None)


class RequestContextIdentityProvider:
    """Reads the user id set with set_request_context()."""

    async def current_user_id(self) -> str | None:
        return _user_id.get()


class StaticIdentityProvider:
    def __init__(self, user_id: str | None):
        self._user_id = user_id

    async def current_user_id(self) -> str | None:
        return self._user_id


def build_identity_provider(
    settings: Settings,
    client: AsyncClient | None,
) -> IdentityProvider | None:
    """
    Pick the provider configured by `identity_mode`.

    Session mode needs a Supabase client; without one there is no
    provider and callers report the backend as unavailable. A configured
    dev_user_id wins in development.
    """
    if settings.dev_user_id and settings.is_development:
        return StaticIdentityProvider(settings.dev_user_id)
    if settings.identity_mode == "device":
        return DeviceIdentityProvider(settings.device_id_path)
    if client is None:
        return None
    return SessionIdentityProvider(client)
