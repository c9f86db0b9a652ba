"""
Mealink - Inventory Ingestion Pipeline.

The single state-changing entry point: resolve every input line to an
ingredient, then record all lines with one batch insert.

Nothing is written until every line has resolved. If line 3 of 5 fails,
lines 1-2 are not in the ledger either. Ingredients created while
resolving lines 1-2 do stay in the catalog, and a retry reuses them
through the resolver's dedup lookup instead of creating duplicates.
"""

import logging

from mealink.db.catalog import IngredientCatalogClient
from mealink.db.ledger import InventoryLedgerClient
from mealink.errors import AuthRequiredError, BackendUnavailableError
from mealink.ingredients.resolver import IngredientResolver
from mealink.models import IngestResult, IngredientIdentity, InventoryLine, InventoryRecord
from mealink.tools.normalize import parse_quantity

logger = logging.getLogger(__name__)


class InventoryIngestionPipeline:
    """
    Resolve-then-insert orchestrator.

    Collaborators are optional so a client without a configured backend
    can still be constructed; ingest() then fails with
    BackendUnavailableError.
    """

    def __init__(
        self,
        catalog: IngredientCatalogClient | None,
        ledger: InventoryLedgerClient | None,
        resolver: IngredientResolver | None = None,
    ):
        if resolver is None and catalog is not None:
            resolver = IngredientResolver(catalog)
        self._resolver = resolver
        self._ledger = ledger

    @property
    def is_available(self) -> bool:
        return self._resolver is not None and self._ledger is not None

    async def ingest(self, lines: list[InventoryLine], requester_id: str | None) -> IngestResult:
        """
        Record inventory lines for the requester.

        Lines with a blank name are skipped. Lines are resolved one at a
        time in their given order, then submitted as a single batch.

        Raises:
            BackendUnavailableError: no catalog/ledger configured
            AuthRequiredError: requester_id is missing
            RemoteReadError / RemoteWriteError: first failure, nothing inserted
        """
        if not self.is_available:
            raise BackendUnavailableError()
        if not requester_id:
            raise AuthRequiredError()

        records: list[InventoryRecord] = []
        for line in lines:
            if not line.name_input.strip():
                continue
            ingredient = await self._resolver.resolve(line, requester_id)
            records.append(build_record(line, ingredient, requester_id))

        if not records:
            logger.debug("Nothing to ingest: all lines blank")
            return IngestResult()

        await self._ledger.insert_batch(records)
        logger.info(f"Ingested {len(records)} lines for {requester_id}")
        return IngestResult(records=records)


def build_record(line: InventoryLine, ingredient: IngredientIdentity, owner_id: str) -> InventoryRecord:
    """Combine a line with its resolved ingredient into a ledger record."""
    unit = line.unit_input.strip() or ingredient.unit or ""
    return InventoryRecord(
        ingredient_id=ingredient.id,
        quantity=parse_quantity(line.quantity_input),
        unit=unit,
        location=line.location,
        expires_at=line.expires_at,
        owner_id=owner_id,
    )
