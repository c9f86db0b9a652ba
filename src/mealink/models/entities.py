"""
Mealink - Entity Models.

These models map to the Supabase tables `ingredients` and `inventory`.
They are used for:
- Decoding store rows into typed values
- Building insert payloads
- Input rows coming from the presentation layer
"""

from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from mealink.tools.normalize import normalize_name


# =============================================================================
# Enums
# =============================================================================


class IngredientScope(str, Enum):
    """Who can see a catalog entry."""

    MASTER = "master"  # Curated, shared by everyone
    USER = "user"      # Private to the creating user/device


class IngredientStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"  # User-submitted, awaiting curation


class StorageLocation(str, Enum):
    REFRIGERATED = "refrigerated"
    FROZEN = "frozen"
    AMBIENT = "ambient"


# =============================================================================
# Catalog
# =============================================================================


class IngredientIdentity(BaseModel):
    """
    One canonical ingredient from the `ingredients` table.

    Master entries are curated and shared; user entries are created lazily
    the first time a user logs a name that matches nothing, and start out
    pending.
    """

    id: str
    name: str
    normalized_name: str
    category: str | None = None
    unit: str | None = None
    scope: IngredientScope = IngredientScope.MASTER
    status: IngredientStatus = IngredientStatus.ACTIVE
    owner_id: str | None = None  # Only set for user scope

    @classmethod
    def from_row(cls, row: dict) -> "IngredientIdentity":
        """Build from a store row (column names as in the `ingredients` table)."""
        return cls(
            id=str(row["id"]),
            name=row["name"],
            normalized_name=row.get("normalized_name") or normalize_name(row["name"]),
            category=row.get("category"),
            unit=row.get("unit"),
            scope=row.get("scope") or IngredientScope.MASTER,
            status=row.get("status") or IngredientStatus.ACTIVE,
            owner_id=str(row["owner_user_id"]) if row.get("owner_user_id") else None,
        )


# =============================================================================
# Inventory
# =============================================================================


class InventoryLine(BaseModel):
    """
    One input row as typed by the user. Never persisted as-is.

    quantity_input and unit_input are raw text; they are interpreted when
    the line is ingested.
    """

    name_input: str = ""
    quantity_input: str = ""
    unit_input: str = ""
    location: StorageLocation = StorageLocation.REFRIGERATED
    expires_at: str | None = None
    selected_suggestion: IngredientIdentity | None = None


class InventoryRecord(BaseModel):
    """A row of the `inventory` table, created once per ingested line."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    ingredient_id: str
    quantity: Decimal
    unit: str
    location: StorageLocation
    expires_at: str | None = None
    owner_id: str

    def to_row(self) -> dict:
        """Insert payload for the `inventory` table."""
        return {
            "id": self.id,
            "ingredient_id": self.ingredient_id,
            "quantity": float(self.quantity),
            "unit": self.unit,
            "location": self.location.value,
            "expires_at": self.expires_at,
            "user_id": self.owner_id,
        }


class InventoryItem(BaseModel):
    """
    Read model for listing a user's inventory.

    Joins the record with its ingredient's name and category.
    """

    id: str
    ingredient_id: str | None = None
    name: str
    category: str | None = None
    quantity: float | None = None
    unit: str | None = None
    location: str | None = None
    expires_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> "InventoryItem":
        ingredient = row.get("ingredients") or {}
        ingredient_id = str(row["ingredient_id"]) if row.get("ingredient_id") else None
        name = ingredient.get("name")
        if not name:
            name = f"Ingredient {(ingredient_id or 'unknown')[:8]}"
        return cls(
            id=str(row["id"]),
            ingredient_id=ingredient_id,
            name=name,
            category=ingredient.get("category"),
            quantity=row.get("quantity"),
            unit=row.get("unit") or ingredient.get("unit"),
            location=row.get("location"),
            expires_at=row.get("expires_at"),
            updated_at=row.get("updated_at"),
        )

    @property
    def quantity_label(self) -> str:
        if self.quantity is None:
            return self.unit or ""
        qty = int(self.quantity) if float(self.quantity).is_integer() else self.quantity
        return f"{qty}{self.unit or ''}"


class IngestResult(BaseModel):
    """Outcome of one successful ingest call."""

    records: list[InventoryRecord] = Field(default_factory=list)

    @property
    def written(self) -> int:
        return len(self.records)
