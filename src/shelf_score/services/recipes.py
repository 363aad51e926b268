"""Recipe browsing service backed by Spoonacular."""

import logging
from dataclasses import dataclass

import httpx

from shelf_score.adapters.spoonacular_client import SpoonacularClient
from shelf_score.domain.recipes import (
    Recipe,
    SpoonacularRecipeDetail,
    SpoonacularSearchResponse,
)
from shelf_score.errors import RecipeNotFoundError, UpstreamUnavailableError
from shelf_score.services.cache import Cache

_logger = logging.getLogger(__name__)


@dataclass
class RecipeService:
    """Service for recipe search and details with caching."""

    client: SpoonacularClient
    cache: Cache
    search_ttl_seconds: int = 3600
    detail_ttl_seconds: int = 86400

    async def search(self, query: str, number: int = 20) -> list[Recipe]:
        """Search recipes by text; failures yield an empty list."""
        cleaned = query.strip()
        if not cleaned:
            return await self.popular(number)
        return await self._search(cleaned, number, sort=None)

    async def popular(self, number: int = 20) -> list[Recipe]:
        """Return popular recipes for default browsing."""
        return await self._search(None, number, sort="popularity")

    async def get_detail(self, recipe_id: int) -> Recipe:
        """Return a recipe with its full ingredient list."""
        cache_key = f"recipes:detail:{recipe_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, Recipe):
            return cached

        try:
            payload = await self.client.recipe_information(recipe_id)
            recipe = SpoonacularRecipeDetail.model_validate(payload).to_recipe()
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                raise RecipeNotFoundError from exc
            raise UpstreamUnavailableError(
                f"HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            _logger.warning("Malformed recipe %s: %s", recipe_id, exc)
            raise UpstreamUnavailableError("invalid response") from exc

        self.cache.set(cache_key, recipe, ttl_seconds=self.detail_ttl_seconds)
        return recipe

    async def _search(
        self, query: str | None, number: int, *, sort: str | None
    ) -> list[Recipe]:
        cache_key = f"recipes:search:{(query or '').lower()}:{sort}:{number}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        try:
            payload = await self.client.complex_search(query, number=number, sort=sort)
            response = SpoonacularSearchResponse.model_validate(payload)
        except (httpx.HTTPError, ValueError) as exc:
            _logger.warning("Recipe search failed (query=%s): %s", query, exc)
            return []

        recipes = [summary.to_recipe() for summary in response.results]
        self.cache.set(cache_key, recipes, ttl_seconds=self.search_ttl_seconds)
        return recipes
