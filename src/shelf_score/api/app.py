"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from shelf_score.api.schemas import (
    CustomGroceryItemRequest,
    GroceryItemUpdate,
    ScoreRequest,
)
from shelf_score.app_logging import configure_logging
from shelf_score.containers import AppContainer
from shelf_score.domain.grocery import GroceryItem
from shelf_score.domain.insights import ProductInsight
from shelf_score.domain.nutrition import NutritionFacts
from shelf_score.domain.products import Product, ScannedProduct
from shelf_score.domain.recipes import Recipe
from shelf_score.domain.scoring import HealthScore
from shelf_score.errors import ShelfScoreError
from shelf_score.services.scoring import compute_health_score


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "ShelfScore starting with scoring profile %s",
            app.state.container.scoring_profile.name,
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ShelfScoreError)
    async def shelf_score_error_handler(
        request: Request, exc: ShelfScoreError
    ) -> JSONResponse:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning("Request %s failed: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "recovery": exc.recovery_suggestion},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": str(exc), "recovery": None},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/score")
    async def score(body: ScoreRequest, request: Request) -> dict[str, object]:
        """Score raw nutrition inputs with the active profile."""
        state_container: AppContainer = request.app.state.container
        nutrition = NutritionFacts.from_values(**body.nutrition.model_dump())
        result = compute_health_score(
            nutrition,
            nova_group=body.nova_group,
            additives=body.additives,
            nutriscore_grade=body.nutriscore_grade,
            profile=state_container.scoring_profile,
        )
        return {
            "profile": state_container.scoring_profile.name,
            "health_score": _health_score_payload(result),
        }

    @app.get("/products/search")
    async def search_products(
        q: str, request: Request, limit: int = 20
    ) -> dict[str, object]:
        """Search Open Food Facts and score the results."""
        state_container: AppContainer = request.app.state.container
        products = await state_container.product_service.search(q, limit=limit)
        return {"products": [_product_payload(product) for product in products]}

    @app.get("/products/{barcode}")
    async def get_product(barcode: str, request: Request) -> dict[str, object]:
        """Look up a product by barcode and record the scan."""
        state_container: AppContainer = request.app.state.container
        product = await state_container.product_service.get_product(barcode)
        state_container.history_service.record(product)
        return _product_payload(product)

    @app.get("/products/{barcode}/insight")
    async def get_insight(barcode: str, request: Request) -> dict[str, object]:
        """Explain a product's score."""
        state_container: AppContainer = request.app.state.container
        product = await state_container.product_service.get_product(barcode)
        insight = await state_container.advisor_service.get_insight(product)
        return _insight_payload(insight)

    @app.get("/history")
    async def list_history(request: Request, limit: int = 50) -> dict[str, object]:
        """Return recent scans."""
        state_container: AppContainer = request.app.state.container
        scans = state_container.history_service.recent(limit)
        return {"scans": [_scan_payload(scan) for scan in scans]}

    @app.delete("/history/{scan_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_history(scan_id: str, request: Request) -> None:
        """Remove a scan from history."""
        state_container: AppContainer = request.app.state.container
        state_container.history_service.remove(scan_id)

    @app.get("/grocery")
    async def list_grocery(request: Request) -> dict[str, object]:
        """Return the grocery list split by purchase state."""
        state_container: AppContainer = request.app.state.container
        grocery = state_container.grocery_service.grouped()
        return {
            "to_buy": [_grocery_payload(item) for item in grocery.to_buy],
            "bought": [_grocery_payload(item) for item in grocery.bought],
        }

    @app.post("/grocery/products/{barcode}", status_code=status.HTTP_201_CREATED)
    async def add_grocery_product(barcode: str, request: Request) -> dict[str, object]:
        """Add a product to the grocery list."""
        state_container: AppContainer = request.app.state.container
        product = await state_container.product_service.get_product(barcode)
        item = state_container.grocery_service.add_product(product)
        return _grocery_payload(item)

    @app.post("/grocery/custom", status_code=status.HTTP_201_CREATED)
    async def add_grocery_custom(
        body: CustomGroceryItemRequest, request: Request
    ) -> dict[str, object]:
        """Add a free-text item to the grocery list."""
        state_container: AppContainer = request.app.state.container
        item = state_container.grocery_service.add_custom(body.name)
        return _grocery_payload(item)

    @app.patch("/grocery/{item_id}")
    async def update_grocery_item(
        item_id: str, body: GroceryItemUpdate, request: Request
    ) -> dict[str, object]:
        """Mark an item as bought or not bought."""
        state_container: AppContainer = request.app.state.container
        item = state_container.grocery_service.mark_bought(item_id, body.is_bought)
        return _grocery_payload(item)

    @app.delete("/grocery/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_grocery_item(item_id: str, request: Request) -> None:
        """Remove an item from the grocery list."""
        state_container: AppContainer = request.app.state.container
        state_container.grocery_service.remove(item_id)

    @app.get("/recipes")
    async def list_recipes(
        request: Request, q: str | None = None, number: int = 20
    ) -> dict[str, object]:
        """Search recipes, or list popular ones when no query is given."""
        state_container: AppContainer = request.app.state.container
        recipes = await state_container.recipe_service.search(q or "", number=number)
        return {"recipes": [_recipe_payload(recipe) for recipe in recipes]}

    @app.get("/recipes/{recipe_id}")
    async def get_recipe(recipe_id: int, request: Request) -> dict[str, object]:
        """Return a recipe with ingredients."""
        state_container: AppContainer = request.app.state.container
        recipe = await state_container.recipe_service.get_detail(recipe_id)
        return _recipe_payload(recipe)

    return app


def _health_score_payload(health: HealthScore) -> dict[str, object]:
    return {
        "score": health.score,
        "grade": health.grade.value,
        "grade_label": health.grade.label,
        "grade_color": health.grade.color,
        "positives": [asdict(factor) for factor in health.positives],
        "negatives": [asdict(factor) for factor in health.negatives],
    }


def _product_payload(product: Product) -> dict[str, object]:
    return {
        "barcode": product.barcode,
        "name": product.name,
        "display_name": product.display_name,
        "brand": product.brand,
        "image_url": product.image_url,
        "nutriscore_grade": product.nutriscore_grade,
        "nova_group": product.nova_group,
        "ingredients": product.ingredients,
        "allergens": product.allergens,
        "additives": product.additives,
        "categories": product.categories,
        "quantity": product.quantity,
        "nutrition": asdict(product.nutrition),
        "nutrient_rows": [
            {"name": row.name, "value": row.value, "level": row.level.value}
            for row in product.nutrition.display_rows()
        ],
        "health_score": _health_score_payload(product.health_score),
    }


def _insight_payload(insight: ProductInsight) -> dict[str, object]:
    return {
        "summary": insight.summary,
        "tip": insight.tip,
        "source": insight.source.value,
        "is_ai_powered": insight.is_ai_powered,
        "badge_label": insight.badge_label,
    }


def _scan_payload(scan: ScannedProduct) -> dict[str, object]:
    return {
        "id": scan.id,
        "barcode": scan.barcode,
        "name": scan.name,
        "brand": scan.brand,
        "score": scan.score,
        "scanned_at": scan.scanned_at.isoformat(),
    }


def _grocery_payload(item: GroceryItem) -> dict[str, object]:
    return {
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


def _recipe_payload(recipe: Recipe) -> dict[str, object]:
    return asdict(recipe)
