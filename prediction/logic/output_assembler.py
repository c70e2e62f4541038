"""
Output Assembler

Builds the final PredictionOutput contract from the rank estimate and the
matched recommendations, and attaches warnings for thin or suspicious results.
"""

import logging
import uuid
from typing import List, Optional

from .contracts import RankEstimate, Recommendation, PredictionOutput
from .constants import Category, ENGINE_VERSION, LOW_RECOMMENDATION_COUNT
from .matcher import group_recommendations
from .rank_estimator import rank_outlook

logger = logging.getLogger(__name__)


def assemble_output(
    category,
    recommendations: List[Recommendation],
    total_evaluated: int,
    rank_estimate: Optional[RankEstimate] = None,
    rank: Optional[int] = None,
    home_state: Optional[str] = None,
    processing_time_ms: Optional[float] = None
) -> PredictionOutput:
    """
    Assemble the final PredictionOutput.

    Args:
        category: Category the prediction was made for
        recommendations: Sorted recommendations
        total_evaluated: Number of colleges in the catalog snapshot
        rank_estimate: Estimate the match was based on, if any
        rank: Known rank the match was based on, when there is no estimate
        home_state: Candidate's home state for the home-state view
        processing_time_ms: Processing time in milliseconds

    Returns:
        Complete PredictionOutput
    """
    if rank_estimate is not None:
        rank = rank_estimate.expected_rank

    warnings = _generate_warnings(category, total_evaluated)

    if total_evaluated and len(recommendations) < LOW_RECOMMENDATION_COUNT:
        warning_msg = (
            f"Low recommendation count: {len(recommendations)} colleges returned. "
            "Consider broadening state or quota filters."
        )
        logger.warning(f"⚠️ {warning_msg}")
        warnings.append(warning_msg)

    return PredictionOutput(
        request_id=str(uuid.uuid4()),
        rank_estimate=rank_estimate,
        outlook=rank_outlook(rank) if rank is not None else None,
        recommendations=recommendations,
        groups=group_recommendations(recommendations, home_state),
        total_colleges_evaluated=total_evaluated,
        total_recommended=len(recommendations),
        processing_time_ms=processing_time_ms,
        engine_version=ENGINE_VERSION,
        warnings=warnings,
    )


def _generate_warnings(category, total_evaluated: int) -> List[str]:
    """Generate any warnings for the output."""
    warnings = []

    if total_evaluated == 0:
        warnings.append("No colleges available in the catalog.")

    if Category.parse(category) is None:
        warnings.append(
            f"Unknown category '{category}'. Rank uses the General adjustment "
            "and no college cutoffs could be matched."
        )

    return warnings
