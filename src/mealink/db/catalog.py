"""
Mealink - Ingredient Catalog Client.

Stateless accessor for the `ingredients` table:
- search: keyword search over master + own entries
- find_exact: the requester's own entry for a normalized name
- create: insert a pending user-scoped entry
"""

import logging

from mealink.db.adapter import DatabaseAdapter, decode_rows, execute
from mealink.errors import RemoteReadError, RemoteWriteError
from mealink.models import IngredientIdentity, IngredientScope, IngredientStatus
from mealink.tools.normalize import normalize_name

logger = logging.getLogger(__name__)

TABLE = "ingredients"
COLUMNS = "id,name,category,unit,scope,status,owner_user_id,normalized_name"
DEFAULT_SEARCH_LIMIT = 10

# Characters with meaning inside a PostgREST logic filter
_RESERVED = set(',.:()"\\ ')


def quote_filter_value(value: str) -> str:
    """
    Quote a value for use inside an `or=(...)` filter.

    Values containing reserved characters are wrapped in double quotes
    with backslashes and quotes escaped.
    """
    if not any(ch in _RESERVED for ch in value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class IngredientCatalogClient:
    """Remote catalog accessor. Holds no state between calls."""

    def __init__(self, db: DatabaseAdapter, search_limit: int = DEFAULT_SEARCH_LIMIT):
        self._db = db
        self._search_limit = search_limit

    async def search(self, keyword: str, requester_id: str) -> list[IngredientIdentity]:
        """
        Search ingredients visible to the requester.

        Visible means active master entries, or the requester's own user
        entries that are active or pending. Matches the normalized name by
        prefix and the display name by substring (kanji input has no useful
        lowercase form). Capped at the search limit.

        Empty keyword -> [] without a network call.
        """
        raw = keyword.strip()
        if not raw:
            return []

        norm = normalize_name(raw)
        name_match = (
            f"normalized_name.ilike.{quote_filter_value(norm + '%')},"
            f"name.ilike.{quote_filter_value('%' + raw + '%')}"
        )
        visibility = (
            "and(scope.eq.master,status.eq.active),"
            f"and(scope.eq.user,owner_user_id.eq.{quote_filter_value(requester_id)},"
            "status.in.(active,pending))"
        )

        query = (
            self._db.table(TABLE)
            .select(COLUMNS)
            .or_(name_match)
            .or_(visibility)
            .limit(self._search_limit)
        )
        response = await execute(query, RemoteReadError, "Ingredient search")

        rows = response.data or []
        logger.debug(f"Search '{raw}' -> {len(rows)} rows")
        return decode_rows(rows, IngredientIdentity.from_row, RemoteReadError, "Ingredient search")

    async def find_exact(self, normalized_name: str, requester_id: str) -> IngredientIdentity | None:
        """Return the requester's own entry with this normalized name, if any."""
        query = (
            self._db.table(TABLE)
            .select(COLUMNS)
            .eq("scope", IngredientScope.USER.value)
            .eq("owner_user_id", requester_id)
            .eq("normalized_name", normalized_name)
            .limit(1)
        )
        response = await execute(query, RemoteReadError, "Ingredient lookup")

        rows = response.data or []
        if not rows:
            return None
        return decode_rows(rows[:1], IngredientIdentity.from_row, RemoteReadError, "Ingredient lookup")[0]

    async def create(self, name: str, requester_id: str) -> IngredientIdentity:
        """
        Insert a new user-scoped, pending entry and return the stored row.

        Raises:
            RemoteWriteError: store/network failure or no row returned
        """
        payload = {
            "name": name,
            "normalized_name": normalize_name(name),
            "scope": IngredientScope.USER.value,
            "status": IngredientStatus.PENDING.value,
            "owner_user_id": requester_id,
        }
        query = self._db.table(TABLE).insert(payload)
        response = await execute(query, RemoteWriteError, "Ingredient insert")

        if not response.data:
            raise RemoteWriteError("Ingredient insert returned no row")

        created = decode_rows(response.data[:1], IngredientIdentity.from_row, RemoteWriteError, "Ingredient insert")[0]
        logger.info(f"Created pending ingredient '{created.name}' ({created.id})")
        return created
