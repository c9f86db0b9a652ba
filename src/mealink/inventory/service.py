"""
Mealink - Inventory Entry Service.

The surface the presentation layer calls while the user fills in the
"add to inventory" form:

- on_input_changed(field_id, text): debounced suggestions for one row
- on_suggestion_picked(field_id, line, suggestion): lock a row to a suggestion
- submit(lines): resolve and record everything, returning a message to show

Suggestions and failures are pushed to the listener as SearchEvents; the
service itself keeps no presentation state.
"""

import logging
from dataclasses import dataclass

from mealink.config import Settings, get_settings
from mealink.db.catalog import IngredientCatalogClient
from mealink.db.client import get_client_if_configured
from mealink.db.ledger import InventoryLedgerClient
from mealink.errors import AuthRequiredError, BackendUnavailableError, MealinkError
from mealink.identity import IdentityProvider, build_identity_provider
from mealink.ingredients.search import (
    DEFAULT_QUIET_PERIOD,
    SearchDebouncer,
    SearchListener,
    SuggestionsPublished,
)
from mealink.inventory.ingestion import InventoryIngestionPipeline
from mealink.models import IngredientIdentity, InventoryItem, InventoryLine
from mealink.tools.normalize import same_ingredient

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Inventory saved"
SUBMIT_FAILED_MESSAGE = "Could not save inventory"


@dataclass
class SubmitResult:
    ok: bool
    message: str
    written: int = 0


class InventoryEntryService:
    """Facade over search, resolution and ingestion for one form."""

    def __init__(
        self,
        catalog: IngredientCatalogClient | None,
        ledger: InventoryLedgerClient | None,
        identity: IdentityProvider | None,
        *,
        quiet_period: float = DEFAULT_QUIET_PERIOD,
        listener: SearchListener | None = None,
    ):
        self._catalog = catalog
        self._ledger = ledger
        self._identity = identity
        self._quiet_period = quiet_period
        self._listener = listener
        self._pipeline = InventoryIngestionPipeline(catalog, ledger)
        self._debouncers: dict[str, SearchDebouncer] = {}

    @classmethod
    async def from_settings(
        cls,
        config: Settings | None = None,
        listener: SearchListener | None = None,
    ) -> "InventoryEntryService":
        """
        Wire the service against Supabase.

        Without Supabase configuration the service is still returned, but
        every operation fails with BackendUnavailableError.
        """
        config = config or get_settings()
        client = await get_client_if_configured(config)

        catalog = IngredientCatalogClient(client, search_limit=config.search_limit) if client else None
        ledger = InventoryLedgerClient(client) if client else None
        identity = build_identity_provider(config, client)

        return cls(
            catalog,
            ledger,
            identity,
            quiet_period=config.search_quiet_period,
            listener=listener,
        )

    # =========================================================================
    # Search
    # =========================================================================

    def debouncer(self, field_id: str) -> SearchDebouncer:
        """The field's debouncer, created on first use."""
        if self._catalog is None or self._identity is None:
            raise BackendUnavailableError()

        debouncer = self._debouncers.get(field_id)
        if debouncer is None:
            debouncer = SearchDebouncer(
                self._catalog,
                self._identity,
                quiet_period=self._quiet_period,
                listener=self._listener,
                field_id=field_id,
            )
            self._debouncers[field_id] = debouncer
        return debouncer

    def on_input_changed(self, field_id: str, text: str) -> None:
        self.debouncer(field_id).on_input_changed(text)

    def on_name_edited(self, field_id: str, line: InventoryLine, text: str) -> InventoryLine:
        """
        Apply typed text to a row and start a search for it.

        A previously picked suggestion is kept only while the text still
        names the same ingredient.
        """
        selected = line.selected_suggestion
        if selected is not None and not same_ingredient(selected.name, text):
            selected = None
        self.on_input_changed(field_id, text)
        return line.model_copy(update={"name_input": text, "selected_suggestion": selected})

    def on_suggestion_picked(
        self,
        field_id: str,
        line: InventoryLine,
        suggestion: IngredientIdentity,
    ) -> InventoryLine:
        """
        Lock a row to a picked suggestion and clear that field's suggestions.

        The listener receives an empty SuggestionsPublished for the field.

        The row takes the suggestion's name, and its default unit when it
        has one.
        """
        debouncer = self._debouncers.get(field_id)
        if debouncer is not None:
            debouncer.clear()
        elif self._listener is not None:
            self._listener(SuggestionsPublished(field_id, "", []))

        return line.model_copy(
            update={
                "selected_suggestion": suggestion,
                "name_input": suggestion.name,
                "unit_input": suggestion.unit or line.unit_input,
            }
        )

    def discard_field(self, field_id: str) -> None:
        """Forget a removed row, cancelling its search."""
        debouncer = self._debouncers.pop(field_id, None)
        if debouncer is not None:
            debouncer.cancel()

    def close(self) -> None:
        for debouncer in self._debouncers.values():
            debouncer.cancel()
        self._debouncers.clear()

    # =========================================================================
    # Ingestion
    # =========================================================================

    async def submit(self, lines: list[InventoryLine]) -> SubmitResult:
        """
        Ingest the form's rows.

        Every failure becomes a failed result carrying a message to show.
        Core errors keep their own message; anything unexpected is logged
        with its traceback and reported as SUBMIT_FAILED_MESSAGE.
        """
        try:
            requester_id = await self._current_user_id()
            result = await self._pipeline.ingest(lines, requester_id)
        except MealinkError as e:
            logger.warning(f"Submit failed: {e.message}")
            return SubmitResult(ok=False, message=e.message)
        except Exception:
            logger.exception("Submit failed")
            return SubmitResult(ok=False, message=SUBMIT_FAILED_MESSAGE)

        return SubmitResult(ok=True, message=SUCCESS_MESSAGE, written=result.written)

    async def list_inventory(self) -> list[InventoryItem]:
        """The current user's inventory, for display."""
        if self._ledger is None:
            raise BackendUnavailableError()
        requester_id = await self._current_user_id()
        if not requester_id:
            raise AuthRequiredError()
        return await self._ledger.list_for_owner(requester_id)

    async def _current_user_id(self) -> str | None:
        if self._identity is None:
            raise BackendUnavailableError()
        return await self._identity.current_user_id()
