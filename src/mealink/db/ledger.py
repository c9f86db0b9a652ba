"""
Mealink - Inventory Ledger Client.

Stateless accessor for the `inventory` table.
"""

import logging

from postgrest.types import ReturnMethod

from mealink.db.adapter import DatabaseAdapter, decode_rows, execute
from mealink.errors import RemoteReadError, RemoteWriteError
from mealink.models import InventoryItem, InventoryRecord

logger = logging.getLogger(__name__)

TABLE = "inventory"
LIST_COLUMNS = """
id,
user_id,
ingredient_id,
quantity,
unit,
location,
expires_at,
updated_at,
ingredients:ingredient_id(
  name,
  category,
  unit
)
"""


class InventoryLedgerClient:
    """Remote inventory accessor. Holds no state between calls."""

    def __init__(self, db: DatabaseAdapter):
        self._db = db

    async def insert_batch(self, records: list[InventoryRecord]) -> None:
        """
        Insert all records in a single request.

        The store applies one insert statement, so the batch persists as a
        whole or not at all. An empty batch is a no-op.
        """
        if not records:
            return

        payloads = [record.to_row() for record in records]
        query = self._db.table(TABLE).insert(payloads, returning=ReturnMethod.minimal)
        await execute(query, RemoteWriteError, "Inventory insert")
        logger.info(f"Inserted {len(payloads)} inventory rows")

    async def list_for_owner(self, owner_id: str) -> list[InventoryItem]:
        """Get the owner's inventory with ingredient names, soonest expiry first."""
        query = (
            self._db.table(TABLE)
            .select(LIST_COLUMNS)
            .eq("user_id", owner_id)
            .order("expires_at")
        )
        response = await execute(query, RemoteReadError, "Inventory fetch")
        return decode_rows(response.data or [], InventoryItem.from_row, RemoteReadError, "Inventory fetch")
