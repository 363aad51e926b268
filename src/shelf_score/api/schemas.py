"""Request models for the HTTP API."""

from pydantic import BaseModel, Field


class NutritionInput(BaseModel):
    """Per-100g nutrition values; missing values count as 0."""

    calories: float | None = None
    fat: float | None = None
    saturated_fat: float | None = None
    carbohydrates: float | None = None
    sugars: float | None = None
    fiber: float | None = None
    proteins: float | None = None
    salt: float | None = None
    sodium: float | None = None


class ScoreRequest(BaseModel):
    """Raw scoring inputs."""

    nutrition: NutritionInput = Field(default_factory=NutritionInput)
    nova_group: int | None = Field(default=None, ge=1, le=4)
    additives: list[str] = Field(default_factory=list)
    nutriscore_grade: str | None = Field(default=None, max_length=1)


class CustomGroceryItemRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)


class GroceryItemUpdate(BaseModel):
    is_bought: bool
