"""
Mealink - Debounced Ingredient Search.

One SearchDebouncer per input field. It owns the single active search
for that field and moves through:

    IDLE -> PENDING (quiet-period timer) -> IN_FLIGHT (remote search) -> IDLE

Every keystroke cancels the active timer or request before anything new
starts, so a superseded request can never publish its results.

Usage:
    debouncer = SearchDebouncer(catalog, identity, listener=render)
    debouncer.on_input_changed("tom")   # call from the event loop
    await debouncer.wait()              # optional: block until idle
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from mealink.db.catalog import IngredientCatalogClient
from mealink.errors import AuthRequiredError, MealinkError, RemoteReadError
from mealink.identity import IdentityProvider
from mealink.models import IngredientIdentity
from mealink.tools.normalize import normalize_name

logger = logging.getLogger(__name__)

DEFAULT_QUIET_PERIOD = 0.3  # seconds


class SearchState(Enum):
    IDLE = "idle"
    PENDING = "pending"      # Waiting for the quiet period to elapse
    IN_FLIGHT = "in_flight"  # Remote search running


@dataclass
class SuggestionsPublished:
    """A search completed (or input was cleared) and suggestions changed."""

    field_id: str | None
    query: str
    suggestions: list[IngredientIdentity] = field(default_factory=list)


@dataclass
class SearchFailed:
    """A search failed; the previous suggestions are still valid."""

    field_id: str | None
    query: str
    error: MealinkError


SearchEvent = SuggestionsPublished | SearchFailed
SearchListener = Callable[[SearchEvent], None]


class SearchDebouncer:
    """Coalesces keystrokes into at most one active catalog search."""

    def __init__(
        self,
        catalog: IngredientCatalogClient,
        identity: IdentityProvider,
        *,
        quiet_period: float = DEFAULT_QUIET_PERIOD,
        listener: SearchListener | None = None,
        field_id: str | None = None,
    ):
        self._catalog = catalog
        self._identity = identity
        self._quiet_period = quiet_period
        self._listener = listener
        self._field_id = field_id

        self._task: asyncio.Task | None = None
        self._state = SearchState.IDLE
        self._suggestions: list[IngredientIdentity] = []
        self._last_error: MealinkError | None = None

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def suggestions(self) -> list[IngredientIdentity]:
        return list(self._suggestions)

    @property
    def last_error(self) -> MealinkError | None:
        return self._last_error

    def on_input_changed(self, text: str) -> None:
        """
        Handle a keystroke.

        Must be called from a running event loop. Blank input clears the
        suggestions immediately; anything else restarts the quiet period.
        """
        self.cancel()

        if not normalize_name(text):
            self._suggestions = []
            self._publish(SuggestionsPublished(self._field_id, "", []))
            return

        self._state = SearchState.PENDING
        self._task = asyncio.get_running_loop().create_task(
            self._debounced_search(text.strip())
        )

    def clear(self) -> None:
        """Cancel any active search and publish an empty suggestion list."""
        self.cancel()
        self._suggestions = []
        self._publish(SuggestionsPublished(self._field_id, "", []))

    def cancel(self) -> None:
        """Cancel the pending timer or in-flight request, if any."""
        if self._task is not None and not self._task.done():
            logger.debug(f"Cancelling {self._state.value} search (field={self._field_id})")
            self._task.cancel()
        self._task = None
        self._state = SearchState.IDLE

    async def wait(self) -> None:
        """Wait until no search is active (follows restarts)."""
        while self._task is not None and not self._task.done():
            await asyncio.wait([self._task])

    async def _debounced_search(self, keyword: str) -> None:
        await asyncio.sleep(self._quiet_period)

        self._state = SearchState.IN_FLIGHT
        logger.debug(f"Searching '{keyword}' (field={self._field_id})")
        error: MealinkError | None = None
        try:
            requester_id = await self._identity.current_user_id()
            if requester_id is None:
                raise AuthRequiredError()
            results = await self._catalog.search(keyword, requester_id)
        except MealinkError as e:
            error = e
        except Exception as e:
            logger.exception(f"Search '{keyword}' failed (field={self._field_id})")
            error = RemoteReadError(f"Ingredient search failed: {e}")
        finally:
            # A cancelled task must not reset the search that replaced it
            if self._task is asyncio.current_task():
                self._finish()

        if error is not None:
            self._last_error = error
            self._publish(SearchFailed(self._field_id, keyword, error))
            return

        self._last_error = None
        self._suggestions = list(results)
        self._publish(SuggestionsPublished(self._field_id, keyword, self.suggestions))

    def _finish(self) -> None:
        self._task = None
        self._state = SearchState.IDLE

    def _publish(self, event: SearchEvent) -> None:
        if self._listener is not None:
            self._listener(event)
