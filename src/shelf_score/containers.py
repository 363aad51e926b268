"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from shelf_score.adapters.off_client import HttpxOpenFoodFactsClient
from shelf_score.adapters.openai_insight_client import OpenAIInsightClient
from shelf_score.adapters.spoonacular_client import HttpxSpoonacularClient
from shelf_score.adapters.supabase_grocery_repository import SupabaseGroceryRepository
from shelf_score.adapters.supabase_history_repository import (
    SupabaseScanHistoryRepository,
)
from shelf_score.adapters.supabase_product_cache_repository import (
    SupabaseProductCacheRepository,
)
from shelf_score.config import Settings
from shelf_score.services.advisor import AdvisorService
from shelf_score.services.cache import InMemoryCache
from shelf_score.services.grocery import GroceryListService
from shelf_score.services.history import HistoryService
from shelf_score.services.products import ProductService
from shelf_score.services.recipes import RecipeService
from shelf_score.services.scoring import ScoringProfile, get_profile


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    scoring_profile: ScoringProfile
    product_service: ProductService
    history_service: HistoryService
    grocery_service: GroceryListService
    recipe_service: RecipeService
    advisor_service: AdvisorService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    profile = get_profile(resolved_settings.scoring_profile)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    cache = InMemoryCache()
    off_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.off_user_agent,
    )
    spoonacular_client = HttpxSpoonacularClient.create(
        api_key=resolved_settings.spoonacular_api_key,
        base_url=resolved_settings.spoonacular_base_url,
    )
    insight_client = (
        OpenAIInsightClient.create(
            api_key=resolved_settings.openai_api_key,
            model=resolved_settings.openai_model,
            store=resolved_settings.openai_store,
        )
        if resolved_settings.openai_api_key
        else None
    )
    product_service = ProductService(
        off_client=off_client,
        cache=cache,
        repository=SupabaseProductCacheRepository(supabase_client),
        profile=profile,
        debug=resolved_settings.debug,
    )
    history_service = HistoryService(SupabaseScanHistoryRepository(supabase_client))
    grocery_service = GroceryListService(SupabaseGroceryRepository(supabase_client))
    recipe_service = RecipeService(client=spoonacular_client, cache=cache)
    advisor_service = AdvisorService(client=insight_client)

    async def close_resources() -> None:
        await off_client.close()
        await spoonacular_client.close()
        if insight_client is not None:
            await insight_client.close()

    return AppContainer(
        settings=resolved_settings,
        scoring_profile=profile,
        product_service=product_service,
        history_service=history_service,
        grocery_service=grocery_service,
        recipe_service=recipe_service,
        advisor_service=advisor_service,
        close_resources=close_resources,
    )
