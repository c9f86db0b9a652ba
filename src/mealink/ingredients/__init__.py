"""
Mealink - Ingredient resolution.

- search: debounced, cancellable suggestion search
- resolver: idempotent insert-or-find of ingredients
"""

from mealink.ingredients.resolver import IngredientResolver
from mealink.ingredients.search import (
    SearchDebouncer,
    SearchEvent,
    SearchFailed,
    SearchListener,
    SearchState,
    SuggestionsPublished,
)

__all__ = [
    "IngredientResolver",
    "SearchDebouncer",
    "SearchEvent",
    "SearchFailed",
    "SearchListener",
    "SearchState",
    "SuggestionsPublished",
]
