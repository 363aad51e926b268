"""Supabase implementation for the grocery list."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from shelf_score.domain.grocery import GroceryItem
from shelf_score.services.grocery import GroceryRepository


@dataclass
class SupabaseGroceryRepository(GroceryRepository):
    """Supabase-backed repository for grocery items."""

    client: Client

    def add(self, item: GroceryItem) -> GroceryItem:
        """Insert an item and return the stored row."""
        response = (
            self.client.table("grocery_items")
            .insert(
                {
                    "id": item.id,
                    "barcode": item.barcode,
                    "name": item.name,
                    "brand": item.brand,
                    "image_url": item.image_url,
                    "health_score": item.health_score,
                    "is_bought": item.is_bought,
                    "added_at": item.added_at.isoformat(),
                    "is_custom": item.is_custom,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create grocery item")
        return _parse_item(response.data[0])

    def get(self, item_id: str) -> GroceryItem | None:
        """Return an item by id, if present."""
        response = (
            self.client.table("grocery_items")
            .select("*")
            .eq("id", item_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def list_items(self) -> list[GroceryItem]:
        """Return all items, newest first."""
        response = (
            self.client.table("grocery_items")
            .select("*")
            .order("added_at", desc=True)
            .execute()
        )
        return [_parse_item(row) for row in response.data or []]

    def set_bought(self, item_id: str, is_bought: bool) -> GroceryItem | None:
        """Update the bought flag and return the updated item."""
        response = (
            self.client.table("grocery_items")
            .update({"is_bought": is_bought})
            .eq("id", item_id)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def delete(self, item_id: str) -> None:
        """Remove an item."""
        self.client.table("grocery_items").delete().eq("id", item_id).execute()


def _parse_item(row: dict[str, object]) -> GroceryItem:
    """Parse a grocery row into a domain model."""
    return GroceryItem(
        id=str(row["id"]),
        barcode=str(row.get("barcode", "")),
        name=str(row.get("name", "")),
        brand=str(row.get("brand") or ""),
        image_url=row.get("image_url"),
        health_score=int(row.get("health_score", 0)),
        is_bought=bool(row.get("is_bought", False)),
        added_at=datetime.fromisoformat(str(row["added_at"])),
        is_custom=bool(row.get("is_custom", False)),
    )
