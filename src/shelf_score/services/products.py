"""Product lookup service integrating Open Food Facts."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import httpx

from shelf_score.adapters.off_client import OpenFoodFactsClient
from shelf_score.domain.nutrition import NutritionFacts
from shelf_score.domain.openfoodfacts import (
    OffProduct,
    OffProductResponse,
    OffSearchResponse,
)
from shelf_score.domain.products import CachedProduct, Product
from shelf_score.errors import (
    InvalidBarcodeError,
    ProductNotFoundError,
    RateLimitedError,
    UpstreamUnavailableError,
)
from shelf_score.services.cache import Cache
from shelf_score.services.scoring import (
    STRICT_PROFILE,
    ScoringProfile,
    compute_health_score,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

MIN_BARCODE_LENGTH = 8
MAX_BARCODE_LENGTH = 14
_NON_RETRYABLE_STATUSES = {"404", "429"}

_logger = logging.getLogger(__name__)


class ProductCacheRepository(Protocol):
    """Persistence interface for offline product inputs."""

    def get(self, barcode: str) -> CachedProduct | None:
        """Return cached inputs for a barcode, if present."""

    def upsert(self, record: CachedProduct) -> None:
        """Insert or replace cached inputs for a barcode."""


@dataclass
class ProductService:
    """Service for scored product lookups with caching."""

    off_client: OpenFoodFactsClient
    cache: Cache
    repository: ProductCacheRepository
    profile: ScoringProfile = STRICT_PROFILE
    product_ttl_seconds: int = 86400
    search_ttl_seconds: int = 3600
    debug: bool = False
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def get_product(self, barcode: str) -> Product:
        """Fetch, score and cache a product by barcode."""
        barcode = validate_barcode(barcode)
        cache_key = f"off:product:{barcode}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, Product):
            return cached

        try:
            payload = await self._call_with_retry(
                lambda: self.off_client.get_product(barcode),
                action=f"get_product:{barcode}",
            )
            response = OffProductResponse.model_validate(payload)
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if status_code == 404:
                raise ProductNotFoundError from exc
            if status_code == 429:
                raise RateLimitedError from exc
            return self._load_offline(barcode, detail=f"HTTP {status_code}")
        except httpx.HTTPError as exc:
            detail = str(exc) or type(exc).__name__
            return self._load_offline(barcode, detail=detail)
        except ValueError as exc:
            _logger.warning("Malformed product payload for %s: %s", barcode, exc)
            return self._load_offline(barcode, detail="invalid response")

        if response.status != 1 or response.product is None:
            raise ProductNotFoundError
        product = product_from_off(
            response.code or barcode, response.product, self.profile
        )
        self.repository.upsert(CachedProduct.from_product(product))
        self.cache.set(cache_key, product, ttl_seconds=self.product_ttl_seconds)
        if self.debug:
            _logger.info(
                "Product lookup OFF: barcode=%s score=%s",
                barcode,
                product.health_score.score,
            )
        return product

    async def search(self, query: str, limit: int = 20) -> list[Product]:
        """Search products by name or brand."""
        cleaned = query.strip()
        if not cleaned:
            return []
        cache_key = f"off:search:{cleaned.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        try:
            payload = await self._call_with_retry(
                lambda: self.off_client.search_products(cleaned, page_size=limit),
                action="search",
            )
            response = OffSearchResponse.model_validate(payload)
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if status_code == 429:
                raise RateLimitedError from exc
            raise UpstreamUnavailableError(f"HTTP {status_code}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            _logger.warning("Malformed search payload for %r: %s", cleaned, exc)
            raise UpstreamUnavailableError("invalid response") from exc
        products = [
            product_from_off(item.code, item, self.profile)
            for item in response.products
            if item.code
        ]
        self.cache.set(cache_key, products, ttl_seconds=self.search_ttl_seconds)
        if self.debug:
            _logger.info(
                "Product search OFF: query=%s results=%s", cleaned, len(products)
            )
        return products

    def _load_offline(self, barcode: str, *, detail: str) -> Product:
        """Rebuild a product from cached inputs when upstream is unavailable."""
        record = self.repository.get(barcode)
        if record is None:
            raise UpstreamUnavailableError(detail)
        _logger.warning(
            "Serving cached product %s after upstream failure: %s", barcode, detail
        )
        return restore_product(record, self.profile)

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except httpx.HTTPError as exc:
                attempt += 1
                status_code = _status_code_from_exception(exc)
                if self.debug:
                    _logger.warning(
                        "Open Food Facts %s failed (attempt %s/%s, status=%s): %s",
                        action,
                        attempt,
                        self.retry_attempts + 1,
                        status_code,
                        exc,
                    )
                if (
                    attempt > self.retry_attempts
                    or status_code in _NON_RETRYABLE_STATUSES
                ):
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def validate_barcode(barcode: str) -> str:
    """Return a normalized barcode or raise if it is malformed."""
    cleaned = barcode.strip()
    if not (cleaned.isascii() and cleaned.isdigit()) or not (
        MIN_BARCODE_LENGTH <= len(cleaned) <= MAX_BARCODE_LENGTH
    ):
        raise InvalidBarcodeError
    return cleaned


def product_from_off(
    barcode: str, off_product: OffProduct, profile: ScoringProfile
) -> Product:
    """Build a scored product from an Open Food Facts product."""
    nutriments = off_product.nutriments
    nutrition = NutritionFacts.from_values(
        calories=nutriments.energy_kcal_100g if nutriments else None,
        fat=nutriments.fat_100g if nutriments else None,
        saturated_fat=nutriments.saturated_fat_100g if nutriments else None,
        carbohydrates=nutriments.carbohydrates_100g if nutriments else None,
        sugars=nutriments.sugars_100g if nutriments else None,
        fiber=nutriments.fiber_100g if nutriments else None,
        proteins=nutriments.proteins_100g if nutriments else None,
        salt=nutriments.salt_100g if nutriments else None,
        sodium=nutriments.sodium_100g if nutriments else None,
    )
    additives = [normalize_additive(tag) for tag in off_product.additives_tags or []]
    allergens = split_allergens(off_product.allergens)
    return Product(
        barcode=barcode,
        name=off_product.product_name or "",
        brand=off_product.brands or "",
        image_url=off_product.image_front_url,
        nutrition=nutrition,
        nutriscore_grade=off_product.nutrition_grades,
        nova_group=off_product.nova_group,
        ingredients=off_product.ingredients_text,
        allergens=allergens,
        additives=additives,
        categories=off_product.categories,
        quantity=off_product.quantity,
        health_score=compute_health_score(
            nutrition,
            nova_group=off_product.nova_group,
            additives=additives,
            nutriscore_grade=off_product.nutrition_grades,
            profile=profile,
        ),
    )


def restore_product(record: CachedProduct, profile: ScoringProfile) -> Product:
    """Rebuild a product from cached inputs, rescoring with ``profile``."""
    return Product(
        barcode=record.barcode,
        name=record.name,
        brand=record.brand,
        image_url=record.image_url,
        nutrition=record.nutrition,
        nutriscore_grade=record.nutriscore_grade,
        nova_group=record.nova_group,
        ingredients=record.ingredients,
        allergens=list(record.allergens),
        additives=list(record.additives),
        categories=record.categories,
        quantity=record.quantity,
        health_score=compute_health_score(
            record.nutrition,
            nova_group=record.nova_group,
            additives=record.additives,
            nutriscore_grade=record.nutriscore_grade,
            profile=profile,
        ),
    )


def normalize_additive(tag: str) -> str:
    """Turn an OFF additive tag like ``en:e330`` into ``E330``."""
    words = tag.replace("en:", "").replace("-", " ").split(" ")
    return " ".join(word.capitalize() for word in words)


def split_allergens(raw: str | None) -> list[str]:
    """Split a comma-separated allergen string."""
    if not raw:
        return []
    return [chunk.strip() for chunk in raw.split(",") if chunk.strip()]


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
