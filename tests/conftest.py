"""
Pytest configuration and fixtures for Mealink tests.

Store collaborators are replaced by in-memory fakes (for pipeline and
search behaviour) or by MagicMock query-builder chains (for the
Supabase-facing clients).
"""

import asyncio
import os
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment before importing mealink modules
os.environ["MEALINK_ENV"] = "development"
os.environ.pop("SUPABASE_URL", None)
os.environ.pop("SUPABASE_ANON_KEY", None)

from mealink.errors import RemoteReadError, RemoteWriteError
from mealink.models import IngredientIdentity, IngredientScope, IngredientStatus
from mealink.tools.normalize import normalize_name


USER_ID = "00000000-0000-0000-0000-000000000002"
OTHER_USER_ID = "00000000-0000-0000-0000-000000000003"


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeCatalog:
    """
    In-memory IngredientCatalogClient.

    Records every call; `search_delay` and the fail_* flags let tests
    control timing and failures.
    """

    def __init__(self, entries: list[IngredientIdentity] | None = None):
        self.entries: list[IngredientIdentity] = list(entries or [])
        self.search_calls: list[tuple[str, str]] = []
        self.find_exact_calls: list[tuple[str, str]] = []
        self.create_calls: list[tuple[str, str]] = []
        self.search_delay: float = 0.0
        self.search_delays: dict[str, float] = {}
        self.cancelled_searches: list[str] = []
        self.fail_search = False
        self.fail_create_for: set[str] = set()
        self._next_id = 1

    async def search(self, keyword: str, requester_id: str) -> list[IngredientIdentity]:
        self.search_calls.append((keyword, requester_id))
        delay = self.search_delays.get(keyword, self.search_delay)
        try:
            if delay:
                await asyncio.sleep(delay)
        except asyncio.CancelledError:
            self.cancelled_searches.append(keyword)
            raise
        if self.fail_search:
            raise RemoteReadError("Ingredient search failed: network down")
        norm = normalize_name(keyword)
        return [
            e for e in self.entries
            if e.normalized_name.startswith(norm) and self._visible(e, requester_id)
        ]

    async def find_exact(self, normalized_name: str, requester_id: str) -> IngredientIdentity | None:
        self.find_exact_calls.append((normalized_name, requester_id))
        for e in self.entries:
            if (
                e.scope == IngredientScope.USER
                and e.owner_id == requester_id
                and e.normalized_name == normalized_name
            ):
                return e
        return None

    async def create(self, name: str, requester_id: str) -> IngredientIdentity:
        self.create_calls.append((name, requester_id))
        if normalize_name(name) in self.fail_create_for:
            raise RemoteWriteError("Ingredient insert failed: rejected")
        entry = IngredientIdentity(
            id=f"ing-{self._next_id}",
            name=name,
            normalized_name=normalize_name(name),
            scope=IngredientScope.USER,
            status=IngredientStatus.PENDING,
            owner_id=requester_id,
        )
        self._next_id += 1
        self.entries.append(entry)
        return entry

    @property
    def remote_calls(self) -> int:
        return len(self.search_calls) + len(self.find_exact_calls) + len(self.create_calls)

    @staticmethod
    def _visible(entry: IngredientIdentity, requester_id: str) -> bool:
        if entry.scope == IngredientScope.MASTER:
            return entry.status == IngredientStatus.ACTIVE
        return entry.owner_id == requester_id


class FakeLedger:
    """In-memory InventoryLedgerClient; `fail` makes every insert fail."""

    def __init__(self):
        self.batches: list[list] = []
        self.fail = False

    async def insert_batch(self, records: list) -> None:
        if not records:
            return
        if self.fail:
            raise RemoteWriteError("Inventory insert failed: connection reset")
        self.batches.append(list(records))

    async def list_for_owner(self, owner_id: str) -> list:
        return []

    @property
    def rows(self) -> list:
        return [r for batch in self.batches for r in batch]


class FakeIdentity:
    def __init__(self, user_id: str | None = USER_ID):
        self.user_id = user_id

    async def current_user_id(self) -> str | None:
        return self.user_id


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def master_entries():
    """Curated master ingredients."""
    return [
        IngredientIdentity(id="m-1", name="Tomato", normalized_name="tomato", category="vegetable", unit="pcs"),
        IngredientIdentity(id="m-2", name="Tofu", normalized_name="tofu", category="soy", unit="block"),
        IngredientIdentity(id="m-3", name="Milk", normalized_name="milk", category="dairy", unit="l"),
        IngredientIdentity(
            id="m-4",
            name="Tomatillo",
            normalized_name="tomatillo",
            status=IngredientStatus.PENDING,
        ),
    ]


@pytest.fixture
def catalog(master_entries):
    return FakeCatalog(master_entries)


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
def mock_supabase():
    """Mock async Supabase client for unit tests."""
    mock_client = MagicMock()

    # Mock table operations: every builder method returns the builder
    mock_table = MagicMock()
    for method in ("select", "insert", "eq", "or_", "limit", "order"):
        getattr(mock_table, method).return_value = mock_table
    mock_table.execute = AsyncMock(return_value=MagicMock(data=[]))

    mock_client.table.return_value = mock_table

    return mock_client
