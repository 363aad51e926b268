"""Domain models for the grocery list."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class GroceryItem:
    """A product or free-text entry on the grocery list."""

    id: str
    barcode: str
    name: str
    brand: str
    image_url: str | None
    health_score: int
    is_bought: bool
    added_at: datetime
    is_custom: bool = False


@dataclass(frozen=True)
class GroceryList:
    """Grocery items split by purchase state."""

    to_buy: list[GroceryItem]
    bought: list[GroceryItem]
