from mealink.models.entities import (
    IngestResult,
    IngredientIdentity,
    IngredientScope,
    IngredientStatus,
    InventoryItem,
    InventoryLine,
    InventoryRecord,
    StorageLocation,
)

__all__ = [
    "IngestResult",
    "IngredientIdentity",
    "IngredientScope",
    "IngredientStatus",
    "InventoryItem",
    "InventoryLine",
    "InventoryRecord",
    "StorageLocation",
]
