"""
Mealink - Inventory ingestion.
"""

from mealink.inventory.ingestion import InventoryIngestionPipeline, build_record
from mealink.inventory.service import InventoryEntryService, SubmitResult

__all__ = [
    "InventoryEntryService",
    "InventoryIngestionPipeline",
    "SubmitResult",
    "build_record",
]
