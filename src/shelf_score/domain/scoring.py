"""Health score domain models."""

from dataclasses import dataclass, field
from enum import Enum


class Grade(str, Enum):
    """Letter grade derived from a health score."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"

    @property
    def label(self) -> str:
        return _GRADE_LABELS[self]

    @property
    def color(self) -> str:
        """Hex colour used by clients for gauges and badges."""
        return _GRADE_COLORS[self]


_GRADE_LABELS = {
    Grade.A: "Excellent",
    Grade.B: "Good",
    Grade.C: "Average",
    Grade.D: "Poor",
    Grade.E: "Bad",
}

_GRADE_COLORS = {
    Grade.A: "#21C45E",
    Grade.B: "#8CD138",
    Grade.C: "#FFC208",
    Grade.D: "#FF7D0D",
    Grade.E: "#ED4236",
}


@dataclass(frozen=True)
class ScoreFactor:
    """A named contribution to the health score."""

    name: str
    impact: int
    detail: str


@dataclass(frozen=True)
class HealthScore:
    """Result of a health score computation."""

    score: int
    grade: Grade
    positives: tuple[ScoreFactor, ...] = field(default_factory=tuple)
    negatives: tuple[ScoreFactor, ...] = field(default_factory=tuple)
