"""Product domain models."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from shelf_score.domain.nutrition import NutritionFacts
from shelf_score.domain.scoring import HealthScore


@dataclass(frozen=True)
class Product:
    """A scored grocery product."""

    barcode: str
    name: str
    brand: str
    image_url: str | None
    nutrition: NutritionFacts
    nutriscore_grade: str | None
    nova_group: int | None
    ingredients: str | None
    allergens: list[str]
    additives: list[str]
    categories: str | None
    quantity: str | None
    health_score: HealthScore

    @property
    def display_name(self) -> str:
        """Return a name suitable for display."""
        if not self.name and not self.brand:
            return "Unknown Product"
        return self.name or self.brand


@dataclass(frozen=True)
class CachedProduct:
    """Scoring inputs of a product stored for offline replay.

    The health score is deliberately absent: it is recomputed on load so it
    always reflects the active scoring profile.
    """

    barcode: str
    name: str
    brand: str
    image_url: str | None
    nutrition: NutritionFacts
    nutriscore_grade: str | None
    nova_group: int | None
    ingredients: str | None
    allergens: list[str] = field(default_factory=list)
    additives: list[str] = field(default_factory=list)
    categories: str | None = None
    quantity: str | None = None
    cached_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @classmethod
    def from_product(cls, product: Product) -> "CachedProduct":
        """Capture the inputs of a scored product."""
        return cls(
            barcode=product.barcode,
            name=product.name,
            brand=product.brand,
            image_url=product.image_url,
            nutrition=product.nutrition,
            nutriscore_grade=product.nutriscore_grade,
            nova_group=product.nova_group,
            ingredients=product.ingredients,
            allergens=list(product.allergens),
            additives=list(product.additives),
            categories=product.categories,
            quantity=product.quantity,
        )


@dataclass(frozen=True)
class ScannedProduct:
    """A scan history entry with the score seen at scan time."""

    id: str
    barcode: str
    name: str
    brand: str
    score: int
    scanned_at: datetime
