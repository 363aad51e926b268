"""Shared test fixtures."""

from dataclasses import dataclass, field

import httpx
import pytest

from shelf_score.adapters.off_client import OpenFoodFactsClient
from shelf_score.adapters.spoonacular_client import SpoonacularClient
from shelf_score.config import Settings
from shelf_score.containers import AppContainer
from shelf_score.domain.grocery import GroceryItem
from shelf_score.domain.products import CachedProduct, ScannedProduct
from shelf_score.services.advisor import AdvisorService, InsightClient
from shelf_score.services.cache import InMemoryCache
from shelf_score.services.grocery import GroceryListService, GroceryRepository
from shelf_score.services.history import HistoryService, ScanHistoryRepository
from shelf_score.services.products import ProductCacheRepository, ProductService
from shelf_score.services.recipes import RecipeService
from shelf_score.services.scoring import STRICT_PROFILE

APPLE_BARCODE = "4011200296908"
SPREAD_BARCODE = "3017620422003"

APPLE_PRODUCT: dict[str, object] = {
    "product_name": "Pink Lady Apple",
    "brands": "Orchard Co",
    "image_front_url": "https://images.example.org/apple.jpg",
    "nutriments": {
        "energy-kcal_100g": 52,
        "fat_100g": 0.2,
        "saturated-fat_100g": 0,
        "carbohydrates_100g": 14,
        "sugars_100g": 10,
        "fiber_100g": 2.4,
        "proteins_100g": 0.3,
        "salt_100g": 0.001,
    },
    "nutrition_grades": "a",
    "nova_group": 1,
    "ingredients_text": "Apple",
    "allergens": "",
    "additives_tags": [],
    "categories": "Fruits",
    "quantity": "1 kg",
}

APPLE_PAYLOAD: dict[str, object] = {
    "code": APPLE_BARCODE,
    "status": 1,
    "status_verbose": "product found",
    "product": APPLE_PRODUCT,
}

SPREAD_PAYLOAD: dict[str, object] = {
    "code": SPREAD_BARCODE,
    "status": 1,
    "status_verbose": "product found",
    "product": {
        "product_name": "Hazelnut Cocoa Spread",
        "brands": "Sweet Co",
        "nutriments": {
            "energy-kcal_100g": 535,
            "fat_100g": 30.9,
            "saturated-fat_100g": 21,
            "carbohydrates_100g": 57.5,
            "sugars_100g": 57,
            "fiber_100g": 0,
            "proteins_100g": 4.9,
            "salt_100g": 0.02,
        },
        "nutrition_grades": "e",
        "nova_group": 4,
        "allergens": "en:milk, en:nuts, en:soybeans",
        "additives_tags": ["en:e322", "en:e322i", "en:e150d"],
    },
}


def http_status_error(status_code: int, url: str = "https://api.test/") -> Exception:
    """Build an ``httpx.HTTPStatusError`` carrying ``status_code``."""
    request = httpx.Request("GET", url)
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(
        f"HTTP {status_code}", request=request, response=response
    )


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Fake Open Food Facts client serving in-memory payloads."""

    products: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            APPLE_BARCODE: APPLE_PAYLOAD,
            SPREAD_BARCODE: SPREAD_PAYLOAD,
        }
    )
    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "count": 2,
            "products": [
                {"code": APPLE_BARCODE, **APPLE_PRODUCT},
                {"product_name": "No code product"},
            ],
        }
    )
    error: Exception | None = None
    product_calls: list[str] = field(default_factory=list)
    search_calls: list[str] = field(default_factory=list)

    async def get_product(self, barcode: str) -> dict[str, object]:
        self.product_calls.append(barcode)
        if self.error is not None:
            raise self.error
        return self.products.get(
            barcode, {"code": barcode, "status": 0, "status_verbose": "not found"}
        )

    async def search_products(
        self, query: str, page_size: int = 20
    ) -> dict[str, object]:
        self.search_calls.append(query)
        if self.error is not None:
            raise self.error
        return self.search_payload


@dataclass
class InMemoryProductCacheRepository(ProductCacheRepository):
    """In-memory offline product cache for tests."""

    records: dict[str, CachedProduct] = field(default_factory=dict)

    def get(self, barcode: str) -> CachedProduct | None:
        return self.records.get(barcode)

    def upsert(self, record: CachedProduct) -> None:
        self.records[record.barcode] = record


@dataclass
class InMemoryScanHistoryRepository(ScanHistoryRepository):
    """In-memory scan history for tests."""

    scans: list[ScannedProduct] = field(default_factory=list)

    def add(self, scan: ScannedProduct) -> None:
        self.scans.append(scan)

    def list_recent(self, limit: int) -> list[ScannedProduct]:
        return sorted(self.scans, key=lambda scan: scan.scanned_at, reverse=True)[
            :limit
        ]

    def delete(self, scan_id: str) -> None:
        self.scans = [scan for scan in self.scans if scan.id != scan_id]


@dataclass
class InMemoryGroceryRepository(GroceryRepository):
    """In-memory grocery list for tests."""

    items: dict[str, GroceryItem] = field(default_factory=dict)

    def add(self, item: GroceryItem) -> GroceryItem:
        self.items[item.id] = item
        return item

    def get(self, item_id: str) -> GroceryItem | None:
        return self.items.get(item_id)

    def list_items(self) -> list[GroceryItem]:
        return list(self.items.values())

    def set_bought(self, item_id: str, is_bought: bool) -> GroceryItem | None:
        item = self.items.get(item_id)
        if item is None:
            return None
        updated = GroceryItem(
            id=item.id,
            barcode=item.barcode,
            name=item.name,
            brand=item.brand,
            image_url=item.image_url,
            health_score=item.health_score,
            is_bought=is_bought,
            added_at=item.added_at,
            is_custom=item.is_custom,
        )
        self.items[item_id] = updated
        return updated

    def delete(self, item_id: str) -> None:
        self.items.pop(item_id, None)


@dataclass
class FakeSpoonacularClient(SpoonacularClient):
    """Fake Spoonacular client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "results": [
                {
                    "id": 715538,
                    "title": "Bruschetta Style Pork & Pasta",
                    "image": "https://img.spoonacular.com/recipes/715538.jpg",
                    "nutrition": {
                        "nutrients": [
                            {"name": "Calories", "amount": 521.3, "unit": "kcal"},
                            {"name": "Protein", "amount": 35.2, "unit": "g"},
                            {"name": "Carbohydrates", "amount": 47.1, "unit": "g"},
                            {"name": "Fat", "amount": 20.4, "unit": "g"},
                            {"name": "Fiber", "amount": 4.5, "unit": "g"},
                        ]
                    },
                }
            ],
            "totalResults": 1,
        }
    )
    detail_payload: dict[str, object] = field(
        default_factory=lambda: {
            "id": 715538,
            "title": "Bruschetta Style Pork & Pasta",
            "image": "https://img.spoonacular.com/recipes/715538.jpg",
            "servings": 5,
            "readyInMinutes": 35,
            "extendedIngredients": [
                {
                    "id": 10211821,
                    "name": "bell pepper",
                    "original": "1 bell pepper, diced",
                    "amount": 1,
                    "unit": "",
                    "image": "bell-pepper-orange.png",
                },
                {
                    "id": 20420,
                    "name": "pasta",
                    "original": "300 g pasta",
                    "amount": 300,
                    "unit": "g",
                },
            ],
            "nutrition": {
                "nutrients": [
                    {"name": "Calories", "amount": 521.3, "unit": "kcal"},
                    {"name": "Protein", "amount": 35.2, "unit": "g"},
                ]
            },
        }
    )
    error: Exception | None = None
    search_calls: list[tuple[str | None, int, str | None]] = field(
        default_factory=list
    )

    async def complex_search(
        self, query: str | None, number: int = 20, sort: str | None = None
    ) -> dict[str, object]:
        self.search_calls.append((query, number, sort))
        if self.error is not None:
            raise self.error
        return self.search_payload

    async def recipe_information(self, recipe_id: int) -> dict[str, object]:
        if self.error is not None:
            raise self.error
        return self.detail_payload


@dataclass
class FakeInsightClient(InsightClient):
    """Fake language-model client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "summary": "Mostly fruit sugar with a little fiber.",
            "tip": "Pair with nuts for lasting energy.",
        }
    )
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)

    async def generate(
        self,
        *,
        instructions: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
        spoonacular_api_key="spoonacular-key",
        openai_api_key="openai-key",
    )


@pytest.fixture
def off_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient()


@pytest.fixture
def product_cache_repository() -> InMemoryProductCacheRepository:
    return InMemoryProductCacheRepository()


@pytest.fixture
def history_repository() -> InMemoryScanHistoryRepository:
    return InMemoryScanHistoryRepository()


@pytest.fixture
def grocery_repository() -> InMemoryGroceryRepository:
    return InMemoryGroceryRepository()


@pytest.fixture
def spoonacular_client() -> FakeSpoonacularClient:
    return FakeSpoonacularClient()


@pytest.fixture
def product_service(
    off_client: FakeOpenFoodFactsClient,
    product_cache_repository: InMemoryProductCacheRepository,
) -> ProductService:
    return ProductService(
        off_client=off_client,
        cache=InMemoryCache(),
        repository=product_cache_repository,
        retry_delay_seconds=0.0,
    )


@pytest.fixture
def container(
    settings: Settings,
    product_service: ProductService,
    history_repository: InMemoryScanHistoryRepository,
    grocery_repository: InMemoryGroceryRepository,
    spoonacular_client: FakeSpoonacularClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        scoring_profile=STRICT_PROFILE,
        product_service=product_service,
        history_service=HistoryService(history_repository),
        grocery_service=GroceryListService(grocery_repository),
        recipe_service=RecipeService(client=spoonacular_client, cache=InMemoryCache()),
        advisor_service=AdvisorService(),
        close_resources=close_resources,
    )
