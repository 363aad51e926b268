"""Models for Open Food Facts API payloads."""

from pydantic import BaseModel, ConfigDict, Field


class OffNutriments(BaseModel):
    """Per-100g nutriments as reported by Open Food Facts."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    energy_kcal_100g: float | None = Field(default=None, alias="energy-kcal_100g")
    fat_100g: float | None = None
    saturated_fat_100g: float | None = Field(default=None, alias="saturated-fat_100g")
    carbohydrates_100g: float | None = None
    sugars_100g: float | None = None
    fiber_100g: float | None = None
    proteins_100g: float | None = None
    salt_100g: float | None = None
    sodium_100g: float | None = None


class OffProduct(BaseModel):
    """Product fields requested from Open Food Facts."""

    model_config = ConfigDict(extra="ignore")

    code: str | None = None
    product_name: str | None = None
    brands: str | None = None
    image_front_url: str | None = None
    nutriments: OffNutriments | None = None
    nutrition_grades: str | None = None
    nova_group: int | None = None
    ingredients_text: str | None = None
    allergens: str | None = None
    additives_tags: list[str] | None = None
    categories: str | None = None
    quantity: str | None = None
    nutriscore_score: int | None = None


class OffProductResponse(BaseModel):
    """Envelope returned by the product endpoint."""

    model_config = ConfigDict(extra="ignore")

    code: str | None = None
    status: int | None = None
    status_verbose: str | None = None
    product: OffProduct | None = None


class OffSearchResponse(BaseModel):
    """Envelope returned by the search endpoint."""

    model_config = ConfigDict(extra="ignore")

    count: int | None = None
    products: list[OffProduct] = Field(default_factory=list)
