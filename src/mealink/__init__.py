"""
Mealink - Household food inventory core.

Ingredient resolution and inventory ingestion:
- Debounced, cancellable ingredient search
- Idempotent insert-or-find of user ingredients
- Atomic batch recording of inventory lines
"""

__version__ = "0.3.0"
