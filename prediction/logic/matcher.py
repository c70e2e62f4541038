"""
Institution Matcher

Matches an estimated rank against a college catalog:
- Filters by state and quota
- Looks up the college's cutoff for the candidate's category
- Assigns a banded admission chance from the rank / cutoff ratio
- Sorts by cutoff rank (best first), ties by name

Also builds the derived views (chance bands, type, quota, home state).
"""

import logging
from fractions import Fraction
from typing import Dict, Iterable, List, Optional

from .contracts import Institution, Recommendation, RecommendationGroups
from .constants import (
    Category,
    Quota,
    InstitutionType,
    SortKey,
    ADMISSION_CHANCE_BANDS,
    ALL_STATES_VALUES,
    ALL_QUOTAS_VALUES,
    HIGH_CHANCE_THRESHOLD,
    GOOD_CHANCE_THRESHOLD,
    MODERATE_CHANCE_THRESHOLD,
    CHANCE_LABELS,
)
from .numeric import parse_fee_amount

logger = logging.getLogger(__name__)

UNSPECIFIED_TYPE = "Unspecified"


def admission_chance(rank: float, cutoff: float) -> int:
    """
    Banded admission chance for a rank against a cutoff.

    Compared in exact arithmetic, so a rank sitting on a band edge keeps
    that band. Returns 0 when the rank is more than twice the cutoff.
    """
    rank = Fraction(rank)
    cutoff = Fraction(cutoff)
    for ratio, chance in ADMISSION_CHANCE_BANDS:
        if rank <= cutoff * ratio:
            return chance
    return 0


def chance_label(chance: int) -> str:
    """Display label for an admission chance."""
    for threshold, label in CHANCE_LABELS:
        if chance >= threshold:
            return label
    return CHANCE_LABELS[-1][1]


def _is_all(value: Optional[str], all_values: frozenset) -> bool:
    return value is None or str(value).strip().lower() in all_values


def _matches_state(institution: Institution, state_filter: Optional[str]) -> bool:
    if _is_all(state_filter, ALL_STATES_VALUES):
        return True
    return institution.location == state_filter


def _matches_quota(institution: Institution, quota: Optional[Quota]) -> bool:
    if quota is None:
        return True
    return Quota.parse(institution.quota) == quota


def _resolve_quota_filter(quota_filter: Optional[str]) -> Optional[Quota]:
    """
    Turn a quota filter into a Quota, or None for "no filter".

    Raises:
        ValueError: if the filter names no known quota
    """
    if _is_all(quota_filter, ALL_QUOTAS_VALUES):
        return None
    quota = Quota.parse(quota_filter)
    if quota is None:
        raise ValueError(f"Unknown quota filter: {quota_filter!r}")
    return quota


def _canonical_key(recommendation: Recommendation):
    return (recommendation.cutoff_rank, recommendation.name)


def match_institutions(
    rank: int,
    category,
    state_filter: Optional[str],
    quota_filter: Optional[str],
    catalog: Iterable[Institution]
) -> List[Recommendation]:
    """
    Match a rank against the catalog and return sorted recommendations.

    Args:
        rank: Candidate's (estimated) rank
        category: Category enum or label used for the cutoff lookup
        state_filter: State name, or "All" / "All States"
        quota_filter: Quota label or alias, or "All" / "All Quotas"
        catalog: Institutions to consider

    Returns:
        Recommendations with a non-zero chance, sorted by cutoff rank
        ascending and then by name
    """
    quota = _resolve_quota_filter(quota_filter)
    parsed_category = Category.parse(category)
    if parsed_category is None:
        logger.debug(f"Unknown category {category!r}: no cutoffs to match against")

    recommendations: List[Recommendation] = []

    for institution in catalog:
        if not _matches_state(institution, state_filter):
            continue
        if not _matches_quota(institution, quota):
            continue

        cutoff = institution.cutoff_for(parsed_category) if parsed_category else None
        if cutoff is None:
            continue

        chance = admission_chance(rank, cutoff)
        if chance > 0:
            recommendations.append(Recommendation(
                institution=institution,
                cutoff_rank=cutoff,
                admission_chance=chance,
            ))

    return sorted(recommendations, key=_canonical_key)


def group_recommendations(
    recommendations: List[Recommendation],
    home_state: Optional[str] = None
) -> RecommendationGroups:
    """
    Build the derived views over a sorted recommendation list.

    Each view is a filter over `recommendations` and keeps its order.
    """
    by_type: Dict[str, List[Recommendation]] = {}
    by_quota: Dict[str, List[Recommendation]] = {}

    for rec in recommendations:
        inst_type = rec.institution.type
        type_key = InstitutionType(inst_type).value if inst_type else UNSPECIFIED_TYPE
        by_type.setdefault(type_key, []).append(rec)
        by_quota.setdefault(Quota(rec.institution.quota).value, []).append(rec)

    return RecommendationGroups(
        all=list(recommendations),
        high_chance=[r for r in recommendations if r.admission_chance >= HIGH_CHANCE_THRESHOLD],
        good_chance=[
            r for r in recommendations
            if GOOD_CHANCE_THRESHOLD <= r.admission_chance < HIGH_CHANCE_THRESHOLD
        ],
        moderate_chance=[
            r for r in recommendations
            if MODERATE_CHANCE_THRESHOLD <= r.admission_chance < GOOD_CHANCE_THRESHOLD
        ],
        home_state=[r for r in recommendations if home_state and r.location == home_state],
        by_type=by_type,
        by_quota=by_quota,
    )


def sort_recommendations(
    recommendations: List[Recommendation],
    sort_by=SortKey.CUTOFF
) -> List[Recommendation]:
    """
    Re-sort recommendations for display.

    The canonical cutoff order is the tie-break for every other key, so the
    result stays deterministic. Colleges without a parseable fee sort last.
    """
    key = SortKey(sort_by)
    canonical = sorted(recommendations, key=_canonical_key)

    if key == SortKey.CUTOFF:
        return canonical
    if key == SortKey.CHANCE:
        return sorted(canonical, key=lambda r: -r.admission_chance)
    if key == SortKey.NAME:
        return sorted(canonical, key=lambda r: r.name)
    if key == SortKey.LOCATION:
        return sorted(canonical, key=lambda r: r.location)

    def fee_key(rec: Recommendation):
        amount = parse_fee_amount(rec.institution.fees)
        return (amount is None, amount or 0)

    return sorted(canonical, key=fee_key)
