"""
Cutoff Trend Analysis

Classifies how a college's closing rank moves across years and summarizes
the movement over a set of colleges. Histories are supplied by the caller.
"""

from typing import Iterable, List, Optional

from .contracts import CutoffHistory, TrendAnalysis
from .constants import Trend
from .numeric import round_half_up


def classify_trend(history: CutoffHistory) -> Trend:
    """
    Direction of a cutoff history.

    A trend recorded on the history wins; otherwise the last two years decide.
    """
    if history.trend:
        return Trend(history.trend)
    if len(history.years) < 2:
        return Trend.STABLE

    previous, latest = history.years[-2], history.years[-1]
    if latest.cutoff > previous.cutoff:
        return Trend.UP
    if latest.cutoff < previous.cutoff:
        return Trend.DOWN
    return Trend.STABLE


def analyze_trends(histories: Iterable[CutoffHistory]) -> TrendAnalysis:
    """Count rising/falling/stable cutoffs and the average latest-year rise."""
    histories = list(histories)
    trends = [classify_trend(h) for h in histories]

    increases: List[int] = [
        h.years[-1].cutoff - h.years[-2].cutoff
        for h, trend in zip(histories, trends)
        if trend == Trend.UP and len(h.years) >= 2
    ]

    average_increase = 0
    if increases:
        average_increase = round_half_up(sum(increases) / len(increases))

    return TrendAnalysis(
        total_colleges=len(histories),
        increasing_trend=trends.count(Trend.UP),
        decreasing_trend=trends.count(Trend.DOWN),
        stable_trend=trends.count(Trend.STABLE),
        average_increase=average_increase,
    )


def find_cutoff_by_college(
    histories: Iterable[CutoffHistory],
    college_name: str
) -> Optional[CutoffHistory]:
    """First history whose college name contains `college_name` (case-insensitive)."""
    needle = college_name.strip().lower()
    for history in histories:
        if needle in history.name.lower():
            return history
    return None
