"""Supabase implementation for the offline product cache."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from shelf_score.domain.nutrition import NutritionFacts
from shelf_score.domain.products import CachedProduct
from shelf_score.services.products import ProductCacheRepository

_NUTRITION_COLUMNS = (
    "calories",
    "fat",
    "saturated_fat",
    "carbohydrates",
    "sugars",
    "fiber",
    "proteins",
    "salt",
    "sodium",
)


@dataclass
class SupabaseProductCacheRepository(ProductCacheRepository):
    """Supabase-backed repository of product scoring inputs."""

    client: Client

    def get(self, barcode: str) -> CachedProduct | None:
        """Return cached inputs for a barcode, if present."""
        response = (
            self.client.table("cached_products")
            .select("*")
            .eq("barcode", barcode)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_cached_product(response.data[0])

    def upsert(self, record: CachedProduct) -> None:
        """Insert or replace cached inputs keyed by barcode."""
        payload: dict[str, object] = {
            "barcode": record.barcode,
            "name": record.name,
            "brand": record.brand,
            "image_url": record.image_url,
            "nutriscore_grade": record.nutriscore_grade,
            "nova_group": record.nova_group,
            "ingredients": record.ingredients,
            "allergens": record.allergens,
            "additives": record.additives,
            "categories": record.categories,
            "quantity": record.quantity,
            "cached_at": record.cached_at.isoformat(),
        }
        for column in _NUTRITION_COLUMNS:
            payload[column] = getattr(record.nutrition, column)
        self.client.table("cached_products").upsert(
            payload, on_conflict="barcode"
        ).execute()


def _parse_cached_product(row: dict[str, object]) -> CachedProduct:
    """Parse a cached product row into a domain model."""
    nutrition = NutritionFacts.from_values(
        **{column: row.get(column) for column in _NUTRITION_COLUMNS}
    )
    nova_group = row.get("nova_group")
    extra: dict[str, object] = {}
    cached_at_raw = row.get("cached_at")
    if isinstance(cached_at_raw, str) and cached_at_raw:
        extra["cached_at"] = datetime.fromisoformat(cached_at_raw)
    return CachedProduct(
        barcode=str(row["barcode"]),
        name=str(row.get("name") or ""),
        brand=str(row.get("brand") or ""),
        image_url=row.get("image_url"),
        nutrition=nutrition,
        nutriscore_grade=row.get("nutriscore_grade"),
        nova_group=int(nova_group) if nova_group is not None else None,
        ingredients=row.get("ingredients"),
        allergens=list(row.get("allergens") or []),
        additives=list(row.get("additives") or []),
        categories=row.get("categories"),
        quantity=row.get("quantity"),
        **extra,
    )
