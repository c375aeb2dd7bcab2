"""Prediction scoring engine.

Pure functions: nothing here touches the database, and inputs are never
mutated. Given the same picks, results and rules the breakdown is always
identical.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from motosense.config import Settings, get_settings
from motosense.exceptions import ValidationError

PICK_COUNT = 5

CONFIDENCE_MULTIPLIERS: dict[int, float] = {
    1: 0.5,   # very unsure
    2: 0.75,
    3: 1.0,   # neutral
    4: 1.5,
    5: 2.0,   # very confident
}
DEFAULT_CONFIDENCE = 3

# (minimum streak, multiplier), ascending
STREAK_BONUS_TIERS: tuple[tuple[int, float], ...] = (
    (3, 1.1),
    (7, 1.25),
    (14, 1.5),
    (30, 2.0),
    (60, 2.5),
    (100, 3.0),
)


@dataclass(frozen=True)
class ScoringRules:
    """Point values used by the engine."""

    exact_match_points: int = 10
    top5_points: int = 3
    perfect_bonus_points: int = 50
    holeshot_bonus_points: int = 15
    fastest_lap_bonus_points: int = 10
    streak_bonus_tiers: tuple[tuple[int, float], ...] = STREAK_BONUS_TIERS

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ScoringRules":
        settings = settings or get_settings()
        return cls(
            exact_match_points=settings.exact_match_points,
            top5_points=settings.top5_points,
            perfect_bonus_points=settings.perfect_bonus_points,
            holeshot_bonus_points=settings.holeshot_bonus_points,
            fastest_lap_bonus_points=settings.fastest_lap_bonus_points,
            streak_bonus_tiers=tuple(
                (int(streak), float(multiplier)) for streak, multiplier in settings.streak_bonus_tiers
            ),
        )

    @property
    def max_points(self) -> int:
        return PICK_COUNT * self.exact_match_points

    def streak_multiplier(self, streak: int) -> float:
        """Multiplier of the highest tier the streak reaches."""
        multiplier = 1.0
        for minimum, tier_multiplier in sorted(self.streak_bonus_tiers):
            if streak >= minimum:
                multiplier = tier_multiplier
        return multiplier


@dataclass(frozen=True)
class PositionScore:
    """Outcome for a single pick."""

    rider_id: str
    predicted_position: int  # 1-based
    actual_position: int | None  # 1-based, None when outside the top 5
    outcome: str  # exact / top5 / miss
    points: int


@dataclass(frozen=True)
class ScoreBreakdown:
    """Full score of one prediction."""

    exact_matches: int
    top5_matches: int
    points: int
    bonus_points: int
    perfect_bonus: int
    holeshot_correct: bool
    fastest_lap_correct: bool
    confidence_multiplier: float
    streak_multiplier: float
    streak_bonus: int
    total_points: int
    accuracy: float
    positions: tuple[PositionScore, ...]

    @property
    def is_perfect(self) -> bool:
        return self.exact_matches == PICK_COUNT


def validate_picks(picks: Sequence[str]) -> None:
    """Reject anything that is not exactly five distinct rider IDs."""
    if len(picks) != PICK_COUNT:
        raise ValidationError(f"A prediction needs exactly {PICK_COUNT} riders, got {len(picks)}")
    if any(not isinstance(p, str) or not p.strip() for p in picks):
        raise ValidationError("Rider IDs must be non-empty strings")
    if len(set(picks)) != PICK_COUNT:
        raise ValidationError("A rider can only be picked once per prediction")


def validate_confidence(level: int | None) -> int:
    """Return the confidence level, defaulting to neutral."""
    if level is None:
        return DEFAULT_CONFIDENCE
    if level not in CONFIDENCE_MULTIPLIERS:
        raise ValidationError(f"Confidence level must be between 1 and 5, got {level}")
    return level


def get_confidence_multiplier(level: int | None) -> float:
    """Multiplier for a confidence level; unknown or missing levels are neutral."""
    if level is None:
        return 1.0
    return CONFIDENCE_MULTIPLIERS.get(level, 1.0)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def top5_positions(results: Sequence[str]) -> dict[str, int]:
    """Map rider ID to 0-based finishing index for the top five."""
    positions: dict[str, int] = {}
    for index, rider_id in enumerate(results[:PICK_COUNT]):
        positions.setdefault(rider_id, index)
    return positions


def score_prediction(
    picks: Sequence[str],
    results: Sequence[str],
    rules: ScoringRules | None = None,
    confidence_level: int | None = None,
    holeshot_pick: str | None = None,
    fastest_lap_pick: str | None = None,
    holeshot_winner: str | None = None,
    fastest_lap_winner: str | None = None,
    streak: int = 0,
) -> ScoreBreakdown:
    """Score a five-rider prediction against a finishing order.

    A pick in its exact finishing position earns ``exact_match_points``; a
    pick that finished elsewhere in the top five earns ``top5_points``;
    anything else earns nothing. Results shorter than five entries are
    fine, missing riders just score zero.

    ``streak`` is the user's prediction streak including this race. Once it
    reaches a tier of ``rules.streak_bonus_tiers`` the confidence-adjusted
    points plus the perfect bonus are scaled by that tier's multiplier; the
    extra lands in ``streak_bonus``, never in ``points``.
    """
    validate_picks(picks)
    rules = rules or ScoringRules()
    actual = top5_positions(results)

    exact = 0
    partial = 0
    points = 0
    positions = []
    for index, rider_id in enumerate(picks):
        actual_index = actual.get(rider_id)
        if actual_index == index:
            exact += 1
            award = rules.exact_match_points
            outcome = "exact"
        elif actual_index is not None:
            partial += 1
            award = rules.top5_points
            outcome = "top5"
        else:
            award = 0
            outcome = "miss"

        points += award
        positions.append(
            PositionScore(
                rider_id=rider_id,
                predicted_position=index + 1,
                actual_position=actual_index + 1 if actual_index is not None else None,
                outcome=outcome,
                points=award,
            )
        )

    perfect_bonus = rules.perfect_bonus_points if exact == PICK_COUNT else 0
    holeshot_correct = bool(holeshot_pick) and holeshot_pick == holeshot_winner
    fastest_lap_correct = bool(fastest_lap_pick) and fastest_lap_pick == fastest_lap_winner

    bonus = perfect_bonus
    if holeshot_correct:
        bonus += rules.holeshot_bonus_points
    if fastest_lap_correct:
        bonus += rules.fastest_lap_bonus_points

    multiplier = get_confidence_multiplier(confidence_level)
    weighted = _round_half_up(points * multiplier)
    streak_multiplier = rules.streak_multiplier(streak)
    streak_bonus = _round_half_up((weighted + perfect_bonus) * (streak_multiplier - 1))
    max_points = rules.max_points
    accuracy = round(points / max_points * 100, 1) if max_points else 0.0

    return ScoreBreakdown(
        exact_matches=exact,
        top5_matches=partial,
        points=points,
        bonus_points=bonus,
        perfect_bonus=perfect_bonus,
        holeshot_correct=holeshot_correct,
        fastest_lap_correct=fastest_lap_correct,
        confidence_multiplier=multiplier,
        streak_multiplier=streak_multiplier,
        streak_bonus=streak_bonus,
        total_points=weighted + bonus + streak_bonus,
        accuracy=accuracy,
        positions=tuple(positions),
    )
