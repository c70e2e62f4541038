"""
Catalog Queries

Read-only lookups and statistics over an injected college catalog.
"""

from typing import Dict, Iterable, List

from .contracts import Institution, CatalogStatistics
from .constants import Quota, InstitutionType, DEFAULT_TOP_COLLEGES_LIMIT
from .matcher import UNSPECIFIED_TYPE


def colleges_by_cutoff_range(
    catalog: Iterable[Institution],
    min_rank: int,
    max_rank: int,
    category
) -> List[Institution]:
    """Colleges whose cutoff for `category` lies within [min_rank, max_rank], in catalog order."""
    results = []
    for institution in catalog:
        cutoff = institution.cutoff_for(category)
        if cutoff is not None and min_rank <= cutoff <= max_rank:
            results.append(institution)
    return results


def top_colleges_by_state(
    catalog: Iterable[Institution],
    state: str,
    category,
    limit: int = DEFAULT_TOP_COLLEGES_LIMIT
) -> List[Institution]:
    """
    Most selective colleges of a state for a category.

    Sorted by cutoff ascending; colleges without a cutoff come last.
    """
    in_state = [inst for inst in catalog if inst.location == state]

    def sort_key(inst: Institution):
        cutoff = inst.cutoff_for(category)
        return (cutoff is None, cutoff or 0, inst.name)

    return sorted(in_state, key=sort_key)[:limit]


def summarize_catalog(catalog: Iterable[Institution]) -> CatalogStatistics:
    """Count colleges by type, quota and location."""
    by_type: Dict[str, int] = {t.value: 0 for t in InstitutionType}
    by_quota: Dict[str, int] = {q.value: 0 for q in Quota}
    by_location: Dict[str, int] = {}
    total = 0

    for institution in catalog:
        total += 1
        type_key = InstitutionType(institution.type).value if institution.type else UNSPECIFIED_TYPE
        by_type[type_key] = by_type.get(type_key, 0) + 1
        quota_key = Quota(institution.quota).value
        by_quota[quota_key] = by_quota.get(quota_key, 0) + 1
        by_location[institution.location] = by_location.get(institution.location, 0) + 1

    return CatalogStatistics(
        total=total,
        by_type=by_type,
        by_quota=by_quota,
        by_location=by_location,
    )
