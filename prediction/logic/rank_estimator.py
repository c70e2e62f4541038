"""
Rank Estimator

Converts NEET subject scores into an estimated All-India rank range and a
percentile. Two stages:
1. Base rank from the total score (piecewise-linear curve)
2. Category adjustment (fixed multiplier per reservation category)

Also maps a rank to an overall admission outlook.

All logic is deterministic; the curves are frozen lookup tables.
"""

import logging
from typing import Mapping, Union

from .contracts import ScoreSet, RankEstimate, RankOutlook
from .constants import (
    Category,
    RANK_BANDS,
    RANK_TAIL,
    CATEGORY_MULTIPLIERS,
    DEFAULT_CATEGORY_MULTIPLIER,
    MIN_RANK_FACTOR,
    MAX_RANK_FACTOR,
    MAX_TOTAL_SCORE,
    PERCENTILE_BANDS,
    LOW_PERCENTILE_MULTIPLIER,
    LOW_PERCENTILE_FLOOR,
    MAX_PERCENTILE,
    SCORE_FROM_RANK_BANDS,
    SCORE_FROM_RANK_TAIL,
    RANK_OUTLOOK_BANDS,
    RANK_OUTLOOK_TAIL,
)
from .numeric import round_half_up, clamp

logger = logging.getLogger(__name__)


def calculate_base_rank(total_score: float) -> int:
    """
    Map a total score (0-720) to a General-category rank.

    Picks the highest band whose floor the score meets; lower bands add more
    rank per lost point, so the curve gets steeper as the score drops.
    """
    for score_floor, rank_floor, rank_per_point, band_top in RANK_BANDS:
        if total_score >= score_floor:
            return round_half_up(rank_floor + (band_top - total_score) * rank_per_point)

    rank_floor, rank_per_point, band_top = RANK_TAIL
    return round_half_up(rank_floor + (band_top - total_score) * rank_per_point)


def get_category_multiplier(category) -> float:
    """Rank multiplier for a category; unknown categories use the General factor."""
    parsed = Category.parse(category)
    if parsed is None:
        logger.debug(f"Unknown category {category!r}, using General multiplier")
        return DEFAULT_CATEGORY_MULTIPLIER
    return CATEGORY_MULTIPLIERS[parsed]


def calculate_percentile(total_score: float) -> float:
    """
    Estimate the percentile of a total score.

    The raw score percentage is remapped band by band into a realistic
    percentile curve, then clamped to [0, 99.9].
    """
    base_percentile = (total_score / MAX_TOTAL_SCORE) * 100

    for band_start, floor, multiplier, cap in PERCENTILE_BANDS:
        if base_percentile >= band_start:
            percentile = min(cap, floor + (base_percentile - band_start) * multiplier)
            return clamp(percentile, 0.0, MAX_PERCENTILE)

    percentile = max(LOW_PERCENTILE_FLOOR, base_percentile * LOW_PERCENTILE_MULTIPLIER)
    return clamp(percentile, 0.0, MAX_PERCENTILE)


def estimate_rank(
    scores: Union[ScoreSet, Mapping[str, int]],
    category
) -> RankEstimate:
    """
    Estimate the rank range and percentile for a set of subject scores.

    Args:
        scores: ScoreSet, or a mapping with physics/chemistry/biology keys
        category: Category enum or label; unknown labels fall back to General

    Returns:
        RankEstimate with expected/min/max rank and percentile

    Raises:
        pydantic.ValidationError: if a subject score is out of range
    """
    if not isinstance(scores, ScoreSet):
        scores = ScoreSet(**scores)

    total = scores.total
    base_rank = calculate_base_rank(total)
    multiplier = get_category_multiplier(category)

    expected_rank = round_half_up(base_rank * multiplier)
    parsed = Category.parse(category)

    return RankEstimate(
        expected_rank=expected_rank,
        min_rank=round_half_up(expected_rank * MIN_RANK_FACTOR),
        max_rank=round_half_up(expected_rank * MAX_RANK_FACTOR),
        percentile=calculate_percentile(total),
        total_score=total,
        category=parsed.value if parsed else Category.GENERAL.value,
    )


def estimate_score_from_rank(rank: float, category) -> int:
    """
    Approximate the total score that leads to a given rank.

    Inverse of the base-rank curve after undoing the category multiplier.
    The inversion is coarse: it uses fewer bands than the forward curve.
    """
    if rank < 1:
        raise ValueError(f"Rank must be at least 1, got {rank}")

    adjusted_rank = rank / get_category_multiplier(category)

    for rank_ceiling, score_floor, ranks_per_point in SCORE_FROM_RANK_BANDS:
        if adjusted_rank <= rank_ceiling:
            return round_half_up(score_floor + (rank_ceiling - adjusted_rank) / ranks_per_point)

    rank_start, score_start, ranks_per_point, score_floor = SCORE_FROM_RANK_TAIL
    return round_half_up(max(score_floor, score_start - (adjusted_rank - rank_start) / ranks_per_point))


def rank_outlook(rank: float) -> RankOutlook:
    """Overall admission outlook for a rank; band edges are inclusive."""
    for max_rank, label, chance in RANK_OUTLOOK_BANDS:
        if rank <= max_rank:
            return RankOutlook(label=label, chance=chance)

    label, chance = RANK_OUTLOOK_TAIL
    return RankOutlook(label=label, chance=chance)
