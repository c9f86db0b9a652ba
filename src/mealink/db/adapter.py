"""
Database Adapter Protocol.

Defines the interface the store clients need from a database client.
The real implementation is the async Supabase client; tests pass
MagicMock query-builder chains or in-memory fakes.

The adapter exposes a thin wrapper matching the Supabase/PostgREST
query builder pattern: table() returns a query builder whose
execute() is awaited and yields an object with .data.
"""

import logging
from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

import httpx
from postgrest.exceptions import APIError
from pydantic import ValidationError

from mealink.errors import RemoteError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class DatabaseAdapter(Protocol):
    """
    Abstract database access for the catalog and ledger clients.

    The table() method returns a query builder; the concrete type
    depends on the backend (AsyncSelectRequestBuilder etc. for Supabase).
    Clients build queries fluently on the returned builder.
    """

    def table(self, name: str) -> Any:
        """
        Return a query builder for the given table.

        The returned object must support the PostgREST-style fluent API:
        .select(), .insert(), .eq(), .or_(), .limit(), awaitable .execute().
        """
        ...


def _describe(error: Exception) -> str:
    # APIError keeps the store's message separately from its repr
    return getattr(error, "message", None) or str(error) or type(error).__name__


async def execute(query: Any, error_type: type[RemoteError], action: str) -> Any:
    """
    Await a built query, translating store and transport failures.

    Args:
        query: Fully built query builder
        error_type: RemoteReadError or RemoteWriteError
        action: Short description used in logs and the error message

    Returns:
        The API response (with .data)
    """
    try:
        return await query.execute()
    except (APIError, httpx.HTTPError) as e:
        logger.warning(f"{action} failed: {e}")
        raise error_type(f"{action} failed: {_describe(e)}") from e


def decode_rows(
    rows: list[dict],
    decode: Callable[[dict], T],
    error_type: type[RemoteError],
    action: str,
) -> list[T]:
    """
    Turn store rows into models, translating malformed rows.

    A row missing a required column or carrying a value the model rejects
    fails the whole call with `error_type`.
    """
    try:
        return [decode(row) for row in rows]
    except (ValidationError, KeyError, TypeError) as e:
        logger.warning(f"{action} returned a malformed row: {e}")
        raise error_type(f"{action} returned a malformed row") from e
