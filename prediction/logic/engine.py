"""
Prediction Engine

Main orchestrator that combines the rank estimator and the college matcher.
This is the primary entry point for a full score -> colleges prediction.
"""

import time
from typing import Iterable, Mapping, Optional, Tuple, Union

from .contracts import ScoreSet, Institution, PredictionOutput
from .rank_estimator import estimate_rank
from .matcher import match_institutions
from .output_assembler import assemble_output


class PredictionEngine:
    """
    Runs predictions against one catalog snapshot.

    Pipeline flow:
    1. Rank Estimation - Scores to expected rank range and percentile
    2. Matching - Expected rank against the catalog, filtered and sorted
    3. Grouping - Chance bands, type, quota and home-state views
    4. Output Assembly - Build final PredictionOutput
    """

    def __init__(self, catalog: Iterable[Institution]):
        """
        Initialize the prediction engine.

        Args:
            catalog: Institutions to match against. Copied into an
                immutable snapshot.
        """
        self.catalog: Tuple[Institution, ...] = tuple(catalog)

    def predict(
        self,
        scores: Union[ScoreSet, Mapping[str, int]],
        category,
        state_filter: Optional[str] = "All",
        quota_filter: Optional[str] = "All",
        home_state: Optional[str] = None
    ) -> PredictionOutput:
        """
        Estimate the rank for `scores` and match it against the catalog.

        Raises:
            pydantic.ValidationError: if a subject score is out of range
        """
        start_time = time.perf_counter()

        rank_estimate = estimate_rank(scores, category)
        recommendations = match_institutions(
            rank_estimate.expected_rank,
            category,
            state_filter,
            quota_filter,
            self.catalog,
        )

        processing_time = (time.perf_counter() - start_time) * 1000

        return assemble_output(
            category=category,
            recommendations=recommendations,
            total_evaluated=len(self.catalog),
            rank_estimate=rank_estimate,
            home_state=home_state,
            processing_time_ms=round(processing_time, 2),
        )

    def match(
        self,
        rank: int,
        category,
        state_filter: Optional[str] = "All",
        quota_filter: Optional[str] = "All",
        home_state: Optional[str] = None
    ) -> PredictionOutput:
        """
        Match a rank the caller already knows (e.g. an official result).

        Same output shape as predict(), without a rank estimate.
        """
        start_time = time.perf_counter()

        recommendations = match_institutions(
            rank, category, state_filter, quota_filter, self.catalog
        )

        processing_time = (time.perf_counter() - start_time) * 1000

        return assemble_output(
            category=category,
            recommendations=recommendations,
            total_evaluated=len(self.catalog),
            rank=rank,
            home_state=home_state,
            processing_time_ms=round(processing_time, 2),
        )

    def predict_from_dict(self, request_data: dict) -> PredictionOutput:
        """
        Run predict() from a dictionary request.

        Convenience method for API integration. Expects `scores` and
        `category`, with optional `state`, `quota` and `home_state`.
        """
        return self.predict(
            request_data["scores"],
            request_data["category"],
            state_filter=request_data.get("state", "All"),
            quota_filter=request_data.get("quota", "All"),
            home_state=request_data.get("home_state"),
        )


# Convenience function for simple usage
def get_prediction(
    scores: Union[ScoreSet, Mapping[str, int]],
    category,
    catalog: Iterable[Institution],
    state_filter: Optional[str] = "All",
    quota_filter: Optional[str] = "All",
    home_state: Optional[str] = None
) -> PredictionOutput:
    """Convenience function to run one prediction against a catalog."""
    engine = PredictionEngine(catalog)
    return engine.predict(scores, category, state_filter, quota_filter, home_state)
