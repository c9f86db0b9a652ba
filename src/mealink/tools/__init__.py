"""
Mealink - Tools Package.

Pure helpers shared by the resolver, pipeline and search.
"""

from mealink.tools.normalize import normalize_name, parse_quantity, same_ingredient

__all__ = [
    "normalize_name",
    "parse_quantity",
    "same_ingredient",
]
