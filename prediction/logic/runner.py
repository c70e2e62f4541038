"""
Engine Runner

Orchestrates a prediction against the stored catalog:
1. Fetches colleges via adapter
2. Runs the prediction engine
3. Returns the assembled output

This is a pure orchestration layer - NO scoring, NO banding logic.
"""

import logging
from typing import List, Mapping, Optional, Union

from sqlalchemy.orm import Session

from .adapter import fetch_catalog
from .catalog import summarize_catalog
from .contracts import ScoreSet, PredictionOutput, CatalogStatistics, Recommendation
from .engine import PredictionEngine
from .matcher import sort_recommendations
from .constants import SortKey

logger = logging.getLogger(__name__)


def run_prediction(
    db: Session,
    scores: Union[ScoreSet, Mapping[str, int]],
    category,
    state_filter: Optional[str] = "All",
    quota_filter: Optional[str] = "All",
    home_state: Optional[str] = None
) -> PredictionOutput:
    """
    Main entry point: estimate rank and match colleges from the DB catalog.

    Args:
        db: Database session
        scores: Subject scores
        category: Candidate category
        state_filter: State to restrict colleges to ("All" = no filter)
        quota_filter: Quota to restrict colleges to ("All" = no filter)
        home_state: Candidate's home state for the home-state view

    Returns:
        PredictionOutput
    """
    logger.info(f"🚀 Starting prediction pipeline (category: {category})")
    logger.info(f"🌍 State filter: {state_filter} | Quota filter: {quota_filter}")

    catalog = fetch_catalog(db, state_filter=state_filter)
    if not catalog:
        logger.warning("⚠️ No colleges found matching criteria")

    engine = PredictionEngine(catalog)
    output = engine.predict(scores, category, state_filter, quota_filter, home_state)

    logger.info(f"🎯 Expected rank: {output.rank_estimate.expected_rank}")
    logger.info(
        f"✨ Prediction pipeline complete: {output.total_recommended} colleges "
        f"({output.processing_time_ms:.2f}ms)"
    )

    return output


def run_matching(
    db: Session,
    rank: int,
    category,
    state_filter: Optional[str] = "All",
    quota_filter: Optional[str] = "All",
    home_state: Optional[str] = None,
    sort_by=SortKey.CUTOFF
) -> PredictionOutput:
    """
    Match a known rank against the DB catalog.

    `sort_by` only reorders the flat recommendation list; the grouped views
    keep the canonical cutoff order.
    """
    logger.info(f"🚀 Starting college matching for rank {rank} (category: {category})")

    catalog = fetch_catalog(db, state_filter=state_filter)
    engine = PredictionEngine(catalog)
    output = engine.match(rank, category, state_filter, quota_filter, home_state)

    if SortKey(sort_by) != SortKey.CUTOFF:
        output.recommendations = sort_recommendations(output.recommendations, sort_by)

    logger.info(f"✨ Matching complete: {output.total_recommended} colleges")
    return output


def get_catalog_statistics(db: Session) -> CatalogStatistics:
    """Statistics over the whole stored catalog."""
    return summarize_catalog(fetch_catalog(db))


def get_recommendations_simple(output: PredictionOutput) -> List[dict]:
    """
    Simplified output format for easier consumption.

    Returns a flat list of dicts instead of the nested contracts.
    """
    return [_flatten(rec) for rec in output.recommendations]


def _flatten(rec: Recommendation) -> dict:
    inst = rec.institution
    return {
        "name": inst.name,
        "location": inst.location,
        "type": inst.type,
        "quota": inst.quota,
        "fees": inst.fees,
        "seats": inst.seats,
        "cutoff_rank": rec.cutoff_rank,
        "admission_chance": rec.admission_chance,
    }
