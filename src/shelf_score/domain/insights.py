"""Models for product insights."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field


class InsightSource(str, Enum):
    """Where an insight came from."""

    LANGUAGE_MODEL = "language_model"
    RULE_BASED = "rule_based"


@dataclass(frozen=True)
class ProductInsight:
    """Short explanation of a score plus one shopping tip."""

    summary: str
    tip: str
    source: InsightSource

    @property
    def is_ai_powered(self) -> bool:
        return self.source is not InsightSource.RULE_BASED

    @property
    def badge_label(self) -> str:
        return "AI Insight" if self.is_ai_powered else "Smart Suggestion"


class GeneratedInsight(BaseModel):
    """Structured output expected from the language model."""

    summary: str = Field(min_length=1)
    tip: str = Field(min_length=1)
