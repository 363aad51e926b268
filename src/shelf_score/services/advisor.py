"""Product insight generation with a rule-based fallback."""

import logging
from dataclasses import dataclass
from typing import Protocol

from shelf_score.domain.insights import GeneratedInsight, InsightSource, ProductInsight
from shelf_score.domain.products import Product
from shelf_score.domain.scoring import Grade

INSIGHT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "summary": {"type": "string"},
        "tip": {"type": "string"},
    },
    "required": ["summary", "tip"],
    "additionalProperties": False,
}

INSIGHT_INSTRUCTIONS = (
    "You are a concise nutrition advisor inside a grocery health-scoring app. "
    "Users scan barcodes and receive a 0-100 health score. Your job is to explain "
    "that score clearly and give one practical tip. "
    "Keep the summary to 1-2 short sentences. Keep the tip under 15 words. "
    "Do not repeat the score number in the tip. Be specific, not generic."
)

ULTRA_PROCESSED_GROUP = 4
MANY_ADDITIVES = 3

_logger = logging.getLogger(__name__)


class InsightClient(Protocol):
    """Interface for language-model insight generation."""

    async def generate(
        self,
        *,
        instructions: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Return structured insight data."""


@dataclass
class AdvisorService:
    """Explains health scores, preferring a language model when configured."""

    client: InsightClient | None = None

    async def get_insight(self, product: Product) -> ProductInsight:
        """Return a language-model insight, or the rule-based one on failure."""
        if self.client is not None:
            try:
                raw = await self.client.generate(
                    instructions=INSIGHT_INSTRUCTIONS,
                    prompt=build_prompt(product),
                    schema=INSIGHT_SCHEMA,
                )
                generated = GeneratedInsight.model_validate(raw)
            except Exception:
                _logger.exception(
                    "Insight generation failed for %s; using rules", product.barcode
                )
            else:
                return ProductInsight(
                    summary=generated.summary.strip(),
                    tip=generated.tip.strip(),
                    source=InsightSource.LANGUAGE_MODEL,
                )
        return rule_based_insight(product)


def build_prompt(product: Product) -> str:
    """Describe a scored product for the language model."""
    score = product.health_score
    nutrition = product.nutrition
    negatives = "; ".join(f"{f.name}: {f.detail}" for f in score.negatives[:2])
    positives = ", ".join(f.name for f in score.positives[:2])
    by_brand = f" by {product.brand}" if product.brand else ""
    lines = [
        f"Product: {product.display_name}{by_brand}",
        f"Health Score: {score.score}/100 (Grade {score.grade.value})",
        (
            f"Per 100g: {int(nutrition.calories)} kcal, "
            f"Sugar {nutrition.sugars:.1f}g, "
            f"Saturated Fat {nutrition.saturated_fat:.1f}g, "
            f"Salt {nutrition.salt:.2f}g, "
            f"Fiber {nutrition.fiber:.1f}g, "
            f"Protein {nutrition.proteins:.1f}g"
        ),
    ]
    if product.nova_group is not None:
        lines.append(f"Processing Level (NOVA {product.nova_group})")
    if negatives:
        lines.append(f"Main issues: {negatives}")
    if positives:
        lines.append(f"Positives: {positives}")
    if product.additives:
        lines.append(f"Additives: {len(product.additives)}")
    return "\n".join(lines)


def rule_based_insight(product: Product) -> ProductInsight:
    """Build a deterministic insight from the score breakdown."""
    health = product.health_score
    name = product.display_name
    score = health.score
    top = health.negatives[0] if health.negatives else None
    issues = " and ".join(f.name.lower() for f in health.negatives[:2])

    if health.grade is Grade.A:
        summary = (
            f"{name} is an excellent choice with a score of {score}/100. "
            "It scores well across all nutritional factors with low negatives."
        )
    elif health.grade is Grade.B:
        summary = (
            f"A good product ({score}/100). The main area to watch is "
            f"{top.name.lower()} ({top.detail})."
            if top
            else f"A solid nutritional choice with a score of {score}/100, "
            "above average in its category."
        )
    elif health.grade is Grade.C:
        summary = (
            f"Average nutrition for {name} ({score}/100). The main concern is "
            f"{top.name.lower()} ({top.detail})."
            if top
            else f"{name} has a middling score of {score}/100 with room to "
            "improve its nutritional profile."
        )
    elif health.grade is Grade.D:
        summary = (
            f"{name} scores below average at {score}/100, driven by high "
            f"{issues or 'levels of unhealthy nutrients'}."
        )
    else:
        summary = (
            f"This product scores poorly at {score}/100. High "
            f"{issues or 'unhealthy nutrient levels'} are the main concerns. "
            "Consider alternatives."
        )

    tip = build_tip(
        top.name if top else "",
        nova_group=product.nova_group,
        additive_count=len(product.additives),
    )
    return ProductInsight(summary=summary, tip=tip, source=InsightSource.RULE_BASED)


def build_tip(  # noqa: PLR0911
    factor_name: str, *, nova_group: int | None, additive_count: int
) -> str:
    """Pick a shopping tip for the weakest factor."""
    lower = factor_name.lower()
    if "sugar" in lower:
        return "Look for products with under 5g of sugar per 100g."
    if "saturated" in lower or "fat" in lower:
        return "Choose products with under 1.5g of saturated fat per 100g."
    if "salt" in lower or "sodium" in lower:
        return "Aim for products with under 0.3g of salt per 100g."
    if "energy" in lower or "calori" in lower:
        return "Compare calorie density with similar products in this category."
    if "additive" in lower or "nova" in lower or "process" in lower:
        return "Prefer minimally processed alternatives (NOVA group 1 or 2)."
    if nova_group is not None and nova_group >= ULTRA_PROCESSED_GROUP:
        return "This product is ultra-processed. Look for less processed alternatives."
    if additive_count > MANY_ADDITIVES:
        return "Look for products with a shorter, cleaner ingredient list."
    return "Compare with similar products in this category for a healthier option."
