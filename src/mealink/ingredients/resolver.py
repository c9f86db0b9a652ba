"""
Mealink - Ingredient Resolver.

Turns an inventory line into exactly one catalog ingredient:

1. A suggestion the user picked wins outright (no lookups)
2. Otherwise the requester's own entry with the same normalized name
3. Otherwise a new pending user entry is created

Step 2 keeps "Tomato", " tomato" and "TOMATO" from becoming three rows.
Master entries are never created here; curation happens elsewhere.

Known limitation: two resolve() calls racing on the same new name for the
same user can both miss in step 2 and both create. Only a unique
constraint on (scope, owner_user_id, normalized_name) in the store closes
that gap. Within one ingest call lines are resolved sequentially, so a
single submission never races with itself.
"""

import logging

from mealink.db.catalog import IngredientCatalogClient
from mealink.errors import ResolutionError
from mealink.models import IngredientIdentity, InventoryLine
from mealink.tools.normalize import normalize_name

logger = logging.getLogger(__name__)


class IngredientResolver:
    def __init__(self, catalog: IngredientCatalogClient):
        self._catalog = catalog

    async def resolve(self, line: InventoryLine, requester_id: str) -> IngredientIdentity:
        """
        Resolve a line to an ingredient, creating one only if needed.

        Raises:
            ResolutionError: the line has no name (reason "empty_name")
            RemoteReadError: the dedup lookup failed
            RemoteWriteError: creating the new entry failed
        """
        if line.selected_suggestion is not None:
            return line.selected_suggestion

        return await self.resolve_name(line.name_input, requester_id)

    async def resolve_name(self, name: str, requester_id: str) -> IngredientIdentity:
        """Find-or-create by free-text name."""
        name = name.strip()
        if not name:
            raise ResolutionError.empty_name()

        normalized = normalize_name(name)
        existing = await self._catalog.find_exact(normalized, requester_id)
        if existing is not None:
            logger.debug(f"Reusing ingredient '{existing.name}' for '{name}'")
            return existing

        return await self._catalog.create(name, requester_id)
