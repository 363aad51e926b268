"""Deterministic health score engine.

The score combines nutrient points in the style of Nutri-Score with
modifiers for processing level (NOVA group) and additive load:

1. Negative points from energy, sugars, saturated fat and salt (max 55).
2. Positive points from fiber and protein (max 14), plus an optional
   external grade boost when the profile enables it.
3. ``raw = negative - positive`` is mapped to 0-100 with the profile scale.
4. Processing and additive modifiers are added after scaling.
5. The result is rounded, clamped to 0-100 and mapped to a grade.

Coefficients live in a :class:`ScoringProfile` so they can be swapped
without touching the aggregation logic.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from shelf_score.domain.nutrition import NutritionFacts
from shelf_score.domain.scoring import Grade, HealthScore, ScoreFactor
from shelf_score.errors import UnknownScoringProfileError

ENERGY_THRESHOLDS = tuple(float(kcal) for kcal in range(80, 801, 80))
SATURATED_FAT_THRESHOLDS = (1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0, 10.0)
FIBER_THRESHOLDS = (0.9, 1.9, 2.8, 3.7, 4.7, 5.6, 6.6)
PROTEIN_THRESHOLDS = (1.6, 3.2, 4.8, 6.4, 8.0, 9.6, 11.2)

MAX_ENERGY_POINTS = 10
MAX_SUGAR_POINTS = 15
MAX_SATURATED_FAT_POINTS = 10
MAX_SALT_POINTS = 20
MAX_FIBER_POINTS = 7
MAX_PROTEIN_POINTS = 7

SALT_STEP_G = 0.2
ULTRA_PROCESSED_GROUP = 4


@dataclass(frozen=True)
class ScoringProfile:
    """Named coefficient set for the health score engine."""

    name: str
    scale: float
    # Keyed by NOVA group; ``None`` covers unknown or missing groups.
    processing_modifiers: Mapping[int | None, int]
    # Ascending ``(max_count, modifier)`` tiers; counts above the last tier
    # get ``many_additives_modifier``.
    additive_tiers: tuple[tuple[int, int], ...]
    many_additives_modifier: int
    # Lower-case grade letter to boost. Empty disables the external grade.
    external_grade_boosts: Mapping[str, int]
    # Descending ``(min_score, grade)`` pairs; scores below the last get E.
    grade_breakpoints: tuple[tuple[int, Grade], ...]

    def processing_modifier(self, nova_group: int | None) -> int:
        """Return the modifier for a NOVA group."""
        if nova_group in self.processing_modifiers:
            return self.processing_modifiers[nova_group]
        return self.processing_modifiers[None]

    def additive_modifier(self, count: int) -> int:
        """Return the modifier for an additive count."""
        for max_count, modifier in self.additive_tiers:
            if count <= max_count:
                return modifier
        return self.many_additives_modifier

    def external_grade_boost(self, grade: str | None) -> int:
        """Return the boost for an upstream grade letter."""
        if not grade:
            return 0
        return self.external_grade_boosts.get(grade.strip().lower(), 0)

    def grade_for(self, score: int) -> Grade:
        """Map a final score to a grade using the profile breakpoints."""
        for min_score, grade in self.grade_breakpoints:
            if score >= min_score:
                return grade
        return Grade.E


STRICT_PROFILE = ScoringProfile(
    name="strict",
    scale=1.5,
    processing_modifiers={1: 8, 2: 3, 3: -3, 4: -15, None: -5},
    additive_tiers=((0, 3), (2, -2), (5, -6)),
    many_additives_modifier=-12,
    external_grade_boosts={},
    grade_breakpoints=((80, Grade.A), (65, Grade.B), (45, Grade.C), (22, Grade.D)),
)

MODERATE_PROFILE = ScoringProfile(
    name="moderate",
    scale=1.39,
    processing_modifiers={1: 5, 2: 2, 3: 0, 4: -5, None: -2},
    additive_tiers=((0, 2), (2, 0), (5, -2)),
    many_additives_modifier=-4,
    external_grade_boosts={"a": 3, "b": 2, "c": 1},
    grade_breakpoints=((80, Grade.A), (60, Grade.B), (40, Grade.C), (20, Grade.D)),
)

PROFILES = {profile.name: profile for profile in (STRICT_PROFILE, MODERATE_PROFILE)}


def get_profile(name: str) -> ScoringProfile:
    """Return a scoring profile by name."""
    try:
        return PROFILES[name.strip().lower()]
    except KeyError:
        raise UnknownScoringProfileError(name) from None


def compute_health_score(
    nutrition: NutritionFacts,
    nova_group: int | None = None,
    additives: Sequence[str] = (),
    nutriscore_grade: str | None = None,
    profile: ScoringProfile = STRICT_PROFILE,
) -> HealthScore:
    """Compute a 0-100 health score with an itemized factor breakdown."""
    positives: list[ScoreFactor] = []
    negatives: list[ScoreFactor] = []

    energy_pts = energy_points(nutrition.calories)
    sugar_pts = sugar_points(nutrition.sugars)
    saturated_fat_pts = saturated_fat_points(nutrition.saturated_fat)
    salt_pts = salt_points(nutrition.salt)
    _add_negative(
        negatives, "Calories", energy_pts, f"{int(nutrition.calories)} kcal/100g"
    )
    _add_negative(negatives, "Sugars", sugar_pts, f"{nutrition.sugars:.1f}g/100g")
    _add_negative(
        negatives,
        "Saturated Fat",
        saturated_fat_pts,
        f"{nutrition.saturated_fat:.1f}g/100g",
    )
    _add_negative(negatives, "Salt", salt_pts, f"{nutrition.salt:.2f}g/100g")
    total_negative = energy_pts + sugar_pts + saturated_fat_pts + salt_pts

    fiber_pts = fiber_points(nutrition.fiber)
    protein_pts = protein_points(nutrition.proteins)
    grade_boost = profile.external_grade_boost(nutriscore_grade)
    _add_positive(positives, "Fiber", fiber_pts, f"{nutrition.fiber:.1f}g/100g")
    _add_positive(positives, "Protein", protein_pts, f"{nutrition.proteins:.1f}g/100g")
    if grade_boost > 0 and nutriscore_grade:
        _add_positive(
            positives,
            "Nutri-Score Grade",
            grade_boost,
            f"Grade {nutriscore_grade.strip().upper()}",
        )
    total_positive = fiber_pts + protein_pts + grade_boost

    processing_modifier = profile.processing_modifier(nova_group)
    processing_detail = (
        f"NOVA Group {nova_group}" if nova_group is not None else "Unknown"
    )
    if processing_modifier > 0:
        positives.append(
            ScoreFactor("Minimal Processing", processing_modifier, processing_detail)
        )
    elif processing_modifier < 0:
        name = (
            "Ultra-Processed"
            if nova_group == ULTRA_PROCESSED_GROUP
            else "Processed Food"
        )
        negatives.append(ScoreFactor(name, processing_modifier, processing_detail))

    additive_count = len(additives)
    additive_modifier = profile.additive_modifier(additive_count)
    if additive_modifier > 0:
        positives.append(ScoreFactor("No Additives", additive_modifier, "0 additives"))
    elif additive_modifier < 0:
        negatives.append(
            ScoreFactor("Additives", additive_modifier, f"{additive_count} additive(s)")
        )

    raw_score = total_negative - total_positive
    base_score = 100.0 - raw_score * profile.scale
    adjusted_score = base_score + processing_modifier + additive_modifier
    score = max(0, min(100, _round_half_away_from_zero(adjusted_score)))

    return HealthScore(
        score=score,
        grade=profile.grade_for(score),
        positives=tuple(positives),
        negatives=tuple(negatives),
    )


def points_from_thresholds(
    value: float, thresholds: Sequence[float], max_points: int
) -> int:
    """Count ascending thresholds strictly exceeded by ``value``."""
    points = 0
    for threshold in thresholds:
        if value <= threshold:
            break
        points += 1
    return min(max_points, points)


def energy_points(kcal: float) -> int:
    return points_from_thresholds(kcal, ENERGY_THRESHOLDS, MAX_ENERGY_POINTS)


def sugar_points(grams: float) -> int:
    return _clamp_points(grams, MAX_SUGAR_POINTS)


def saturated_fat_points(grams: float) -> int:
    return points_from_thresholds(
        grams, SATURATED_FAT_THRESHOLDS, MAX_SATURATED_FAT_POINTS
    )


def salt_points(grams: float) -> int:
    return _clamp_points(grams / SALT_STEP_G, MAX_SALT_POINTS)


def fiber_points(grams: float) -> int:
    return points_from_thresholds(grams, FIBER_THRESHOLDS, MAX_FIBER_POINTS)


def protein_points(grams: float) -> int:
    return points_from_thresholds(grams, PROTEIN_THRESHOLDS, MAX_PROTEIN_POINTS)


def _clamp_points(value: float, max_points: int) -> int:
    """Floor a non-negative value into ``[0, max_points]``."""
    if value <= 0:
        return 0
    return min(max_points, math.floor(value))


def _round_half_away_from_zero(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _add_negative(
    factors: list[ScoreFactor], name: str, points: int, detail: str
) -> None:
    if points > 0:
        factors.append(ScoreFactor(name, -points, detail))


def _add_positive(
    factors: list[ScoreFactor], name: str, points: int, detail: str
) -> None:
    if points > 0:
        factors.append(ScoreFactor(name, points, detail))
