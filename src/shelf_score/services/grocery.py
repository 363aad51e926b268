"""Services for managing the grocery list."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from shelf_score.domain.grocery import GroceryItem, GroceryList
from shelf_score.domain.products import Product
from shelf_score.errors import GroceryItemNotFoundError


class GroceryRepository(Protocol):
    """Persistence interface for grocery items."""

    def add(self, item: GroceryItem) -> GroceryItem:
        """Store an item and return it."""

    def get(self, item_id: str) -> GroceryItem | None:
        """Return an item by id, if present."""

    def list_items(self) -> list[GroceryItem]:
        """Return all items, newest first."""

    def set_bought(self, item_id: str, is_bought: bool) -> GroceryItem | None:
        """Update the bought flag and return the item, if present."""

    def delete(self, item_id: str) -> None:
        """Remove an item."""


@dataclass
class GroceryListService:
    """Application service for grocery list operations."""

    repository: GroceryRepository

    def add_product(self, product: Product) -> GroceryItem:
        """Add a scanned or searched product to the list."""
        item = GroceryItem(
            id=str(uuid4()),
            barcode=product.barcode,
            name=product.display_name,
            brand=product.brand,
            image_url=product.image_url,
            health_score=product.health_score.score,
            is_bought=False,
            added_at=datetime.now(tz=UTC),
        )
        return self.repository.add(item)

    def add_custom(self, name: str) -> GroceryItem:
        """Add a free-text item with no product data."""
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Custom grocery item needs a name")
        item = GroceryItem(
            id=str(uuid4()),
            barcode=str(uuid4()),
            name=cleaned,
            brand="",
            image_url=None,
            health_score=0,
            is_bought=False,
            added_at=datetime.now(tz=UTC),
            is_custom=True,
        )
        return self.repository.add(item)

    def mark_bought(self, item_id: str, is_bought: bool = True) -> GroceryItem:
        """Set the bought flag on an item."""
        item = self.repository.set_bought(item_id, is_bought)
        if item is None:
            raise GroceryItemNotFoundError
        return item

    def remove(self, item_id: str) -> None:
        """Remove an item from the list."""
        if self.repository.get(item_id) is None:
            raise GroceryItemNotFoundError
        self.repository.delete(item_id)

    def grouped(self) -> GroceryList:
        """Return items split into still-to-buy and bought."""
        items = sorted(
            self.repository.list_items(), key=lambda item: item.added_at, reverse=True
        )
        return GroceryList(
            to_buy=[item for item in items if not item.is_bought],
            bought=[item for item in items if item.is_bought],
        )
