"""Recipe domain models and Spoonacular payloads."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

INGREDIENT_IMAGE_BASE_URL = "https://spoonacular.com/cdn/ingredients_100x100"


@dataclass(frozen=True)
class RecipeIngredient:
    """Single ingredient line of a recipe."""

    id: int
    name: str
    original: str
    image_url: str | None


@dataclass(frozen=True)
class Recipe:
    """Recipe with per-serving macros."""

    id: int
    title: str
    image_url: str | None
    servings: int
    ready_in_minutes: int
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float
    ingredients: list[RecipeIngredient] | None = None


class SpoonacularNutrient(BaseModel):
    name: str
    amount: float
    unit: str = ""


class SpoonacularNutrition(BaseModel):
    nutrients: list[SpoonacularNutrient] = Field(default_factory=list)

    def amount(self, nutrient_name: str) -> float:
        """Return the amount for a nutrient, matched case-insensitively."""
        wanted = nutrient_name.lower()
        for nutrient in self.nutrients:
            if nutrient.name.lower() == wanted:
                return nutrient.amount
        return 0.0


class SpoonacularIngredient(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    original: str
    amount: float = 0.0
    unit: str = ""
    image: str | None = None


class SpoonacularRecipeSummary(BaseModel):
    """Recipe entry from ``complexSearch``."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str
    image: str | None = None
    nutrition: SpoonacularNutrition | None = None

    def to_recipe(self) -> Recipe:
        return Recipe(
            id=self.id,
            title=self.title,
            image_url=self.image,
            servings=0,
            ready_in_minutes=0,
            **_macros(self.nutrition),
        )


class SpoonacularSearchResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: list[SpoonacularRecipeSummary] = Field(default_factory=list)
    total_results: int = Field(default=0, alias="totalResults")


class SpoonacularRecipeDetail(BaseModel):
    """Recipe payload from ``/recipes/{id}/information``."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str
    image: str | None = None
    servings: int = 0
    ready_in_minutes: int = Field(default=0, alias="readyInMinutes")
    extended_ingredients: list[SpoonacularIngredient] = Field(
        default_factory=list, alias="extendedIngredients"
    )
    nutrition: SpoonacularNutrition | None = None

    def to_recipe(self) -> Recipe:
        ingredients = [
            RecipeIngredient(
                id=ingredient.id,
                name=ingredient.name,
                original=ingredient.original,
                image_url=(
                    f"{INGREDIENT_IMAGE_BASE_URL}/{ingredient.image}"
                    if ingredient.image
                    else None
                ),
            )
            for ingredient in self.extended_ingredients
        ]
        return Recipe(
            id=self.id,
            title=self.title,
            image_url=self.image,
            servings=self.servings,
            ready_in_minutes=self.ready_in_minutes,
            ingredients=ingredients,
            **_macros(self.nutrition),
        )


def _macros(nutrition: SpoonacularNutrition | None) -> dict[str, float]:
    if nutrition is None:
        return {"calories": 0.0, "protein": 0.0, "carbs": 0.0, "fat": 0.0, "fiber": 0.0}
    return {
        "calories": nutrition.amount("Calories"),
        "protein": nutrition.amount("Protein"),
        "carbs": nutrition.amount("Carbohydrates"),
        "fat": nutrition.amount("Fat"),
        "fiber": nutrition.amount("Fiber"),
    }
