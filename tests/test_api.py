"""Tests for the HTTP API."""

from fastapi.testclient import TestClient

from shelf_score.api.app import create_app
from shelf_score.containers import AppContainer
from tests.conftest import (
    APPLE_BARCODE,
    SPREAD_BARCODE,
    FakeOpenFoodFactsClient,
    FakeSpoonacularClient,
    InMemoryGroceryRepository,
    InMemoryScanHistoryRepository,
    http_status_error,
)


def test_health(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_score_endpoint(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/score",
        json={
            "nutrition": {
                "calories": 52,
                "sugars": 10,
                "fiber": 2.4,
                "proteins": 0.3,
                "salt": 0.001,
            },
            "nova_group": 1,
            "additives": [],
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["profile"] == "strict"
    assert body["health_score"]["score"] == 99
    assert body["health_score"]["grade"] == "A"
    assert body["health_score"]["grade_label"] == "Excellent"
    assert body["health_score"]["negatives"] == [
        {"name": "Sugars", "impact": -10, "detail": "10.0g/100g"}
    ]


def test_score_endpoint_clamps_negative_inputs(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post("/score", json={"nutrition": {"sugars": -30}})

    assert response.status_code == 200
    assert response.json()["health_score"]["score"] == 98


def test_score_endpoint_validates_nova_group(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post("/score", json={"nova_group": 9})

    assert response.status_code == 422


def test_get_product_records_history(
    container: AppContainer, history_repository: InMemoryScanHistoryRepository
) -> None:
    client = TestClient(create_app(container))

    response = client.get(f"/products/{APPLE_BARCODE}")

    assert response.status_code == 200
    body = response.json()
    assert body["display_name"] == "Pink Lady Apple"
    assert body["health_score"]["score"] == 99
    assert body["nutrient_rows"][0] == {
        "name": "Calories",
        "value": "52 kcal",
        "level": "Low",
    }
    assert [scan.barcode for scan in history_repository.scans] == [APPLE_BARCODE]

    history = client.get("/history").json()["scans"]
    assert history[0]["score"] == 99

    delete = client.delete(f"/history/{history[0]['id']}")
    assert delete.status_code == 204
    assert history_repository.scans == []


def test_get_product_errors(
    container: AppContainer, off_client: FakeOpenFoodFactsClient
) -> None:
    client = TestClient(create_app(container))

    invalid = client.get("/products/not-a-code")
    missing = client.get("/products/12345678")
    off_client.error = http_status_error(429)
    limited = client.get(f"/products/{SPREAD_BARCODE}")

    assert invalid.status_code == 400
    assert invalid.json()["error"] == "Invalid barcode format"
    assert missing.status_code == 404
    assert missing.json()["recovery"].startswith("This product isn't")
    assert limited.status_code == 429


def test_get_product_upstream_unavailable(
    container: AppContainer, off_client: FakeOpenFoodFactsClient
) -> None:
    off_client.error = http_status_error(500)
    client = TestClient(create_app(container))

    response = client.get(f"/products/{APPLE_BARCODE}")

    assert response.status_code == 502
    assert response.json()["error"] == "Network error: HTTP 500"


def test_search_products(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/products/search", params={"q": "apple"})

    assert response.status_code == 200
    products = response.json()["products"]
    assert [product["barcode"] for product in products] == [APPLE_BARCODE]


def test_product_insight_rule_based(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get(f"/products/{SPREAD_BARCODE}/insight")

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "rule_based"
    assert body["badge_label"] == "Smart Suggestion"
    assert body["tip"]


def test_grocery_flow(
    container: AppContainer, grocery_repository: InMemoryGroceryRepository
) -> None:
    client = TestClient(create_app(container))

    added = client.post(f"/grocery/products/{APPLE_BARCODE}")
    custom = client.post("/grocery/custom", json={"name": "Oat milk"})
    item_id = added.json()["id"]
    patched = client.patch(f"/grocery/{item_id}", json={"is_bought": True})
    grocery = client.get("/grocery").json()

    assert added.status_code == 201
    assert added.json()["health_score"] == 99
    assert custom.status_code == 201
    assert custom.json()["is_custom"] is True
    assert patched.json()["is_bought"] is True
    assert [item["name"] for item in grocery["to_buy"]] == ["Oat milk"]
    assert [item["name"] for item in grocery["bought"]] == ["Pink Lady Apple"]

    deleted = client.delete(f"/grocery/{item_id}")
    assert deleted.status_code == 204
    assert item_id not in grocery_repository.items


def test_grocery_errors(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    blank = client.post("/grocery/custom", json={"name": "   "})
    missing = client.patch("/grocery/missing", json={"is_bought": True})
    missing_delete = client.delete("/grocery/missing")

    assert blank.status_code == 422
    assert missing.status_code == 404
    assert missing_delete.status_code == 404


def test_recipes(
    container: AppContainer, spoonacular_client: FakeSpoonacularClient
) -> None:
    client = TestClient(create_app(container))

    popular = client.get("/recipes")
    detail = client.get("/recipes/715538")

    assert popular.status_code == 200
    assert popular.json()["recipes"][0]["ingredients"] is None
    assert spoonacular_client.search_calls[0] == (None, 20, "popularity")
    assert detail.json()["servings"] == 5
    assert detail.json()["ingredients"][0]["name"] == "bell pepper"


def test_recipe_not_found(
    container: AppContainer, spoonacular_client: FakeSpoonacularClient
) -> None:
    spoonacular_client.error = http_status_error(404)
    client = TestClient(create_app(container))

    response = client.get("/recipes/1")

    assert response.status_code == 404
    assert response.json()["error"] == "Recipe not found"


def test_search_products_upstream_errors(
    container: AppContainer, off_client: FakeOpenFoodFactsClient
) -> None:
    client = TestClient(create_app(container))

    off_client.error = http_status_error(429)
    limited = client.get("/products/search", params={"q": "apple"})
    off_client.error = http_status_error(503)
    unavailable = client.get("/products/search", params={"q": "apple"})

    assert limited.status_code == 429
    assert "error" in limited.json()
    assert unavailable.status_code == 502
    assert unavailable.json()["error"] == "Network error: HTTP 503"


def test_recipes_malformed_upstream_payload(
    container: AppContainer, spoonacular_client: FakeSpoonacularClient
) -> None:
    spoonacular_client.search_payload = {"results": [{"title": "No id"}]}
    spoonacular_client.detail_payload = {"title": "No id"}
    client = TestClient(create_app(container))

    listing = client.get("/recipes", params={"q": "pasta"})
    detail = client.get("/recipes/1")

    assert listing.status_code == 200
    assert listing.json() == {"recipes": []}
    assert detail.status_code == 502
    assert detail.json()["error"] == "Network error: invalid response"
