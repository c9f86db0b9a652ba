"""
Mealink - Database Client.

Provides Supabase access for the ingredient catalog and inventory ledger.
"""

from mealink.db.catalog import IngredientCatalogClient
from mealink.db.client import get_client, get_client_if_configured, reset_client
from mealink.db.ledger import InventoryLedgerClient

__all__ = [
    "IngredientCatalogClient",
    "InventoryLedgerClient",
    "get_client",
    "get_client_if_configured",
    "reset_client",
]
