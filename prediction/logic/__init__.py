"""
Prediction Logic Module

Provides the deterministic NEET rank estimator and college matcher.
The database adapter and runner are imported from their own modules so the
engine itself stays free of persistence dependencies.
"""

from .contracts import (
    ScoreSet,
    RankEstimate,
    RankOutlook,
    Institution,
    Recommendation,
    RecommendationGroups,
    PredictionOutput,
    CatalogStatistics,
    CutoffYear,
    CutoffHistory,
    TrendAnalysis,
)
from .rank_estimator import (
    estimate_rank,
    estimate_score_from_rank,
    calculate_base_rank,
    calculate_percentile,
    get_category_multiplier,
    rank_outlook,
)
from .matcher import (
    match_institutions,
    admission_chance,
    chance_label,
    group_recommendations,
    sort_recommendations,
)
from .catalog import colleges_by_cutoff_range, top_colleges_by_state, summarize_catalog
from .cutoff_trends import classify_trend, analyze_trends, find_cutoff_by_college
from .engine import PredictionEngine, get_prediction
from .constants import Category, Quota, InstitutionType, SortKey, Trend

__all__ = [
    # Main engine
    "PredictionEngine",
    "get_prediction",

    # Rank estimation
    "estimate_rank",
    "estimate_score_from_rank",
    "calculate_base_rank",
    "calculate_percentile",
    "get_category_multiplier",
    "rank_outlook",

    # Matching
    "match_institutions",
    "admission_chance",
    "chance_label",
    "group_recommendations",
    "sort_recommendations",

    # Catalog & trends
    "colleges_by_cutoff_range",
    "top_colleges_by_state",
    "summarize_catalog",
    "classify_trend",
    "analyze_trends",
    "find_cutoff_by_college",

    # Contracts
    "ScoreSet",
    "RankEstimate",
    "RankOutlook",
    "Institution",
    "Recommendation",
    "RecommendationGroups",
    "PredictionOutput",
    "CatalogStatistics",
    "CutoffYear",
    "CutoffHistory",
    "TrendAnalysis",

    # Enums
    "Category",
    "Quota",
    "InstitutionType",
    "SortKey",
    "Trend",
]
