"""Spoonacular recipe API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class SpoonacularClient(Protocol):
    """Interface for Spoonacular API interactions."""

    async def complex_search(
        self, query: str | None, number: int = 20, sort: str | None = None
    ) -> dict[str, object]:
        """Search recipes and return raw API data."""

    async def recipe_information(self, recipe_id: int) -> dict[str, object]:
        """Fetch a recipe with ingredients and nutrition."""


@dataclass
class HttpxSpoonacularClient(SpoonacularClient):
    """HTTPX-backed Spoonacular client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxSpoonacularClient":
        """Create a Spoonacular client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def complex_search(
        self, query: str | None, number: int = 20, sort: str | None = None
    ) -> dict[str, object]:
        """Search recipes with nutrition summaries."""
        params: dict[str, object] = {
            "addRecipeNutrition": "true",
            "number": number,
            "apiKey": self.api_key,
        }
        if query:
            params["query"] = query
        if sort:
            params["sort"] = sort
        response = await self.http_client.get(
            f"{self.base_url}/recipes/complexSearch", params=params, timeout=15
        )
        response.raise_for_status()
        return response.json()

    async def recipe_information(self, recipe_id: int) -> dict[str, object]:
        """Fetch a recipe by id."""
        response = await self.http_client.get(
            f"{self.base_url}/recipes/{recipe_id}/information",
            params={"includeNutrition": "true", "apiKey": self.api_key},
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
