"""
Data Contracts for the Prediction Engine

Defines Pydantic models for the engine inputs (ScoreSet, Institution) and
outputs (RankEstimate, Recommendation, PredictionOutput).
These contracts are the API boundary for the prediction engine.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from .constants import (
    Category,
    Quota,
    InstitutionType,
    Trend,
    MAX_PHYSICS_SCORE,
    MAX_CHEMISTRY_SCORE,
    MAX_BIOLOGY_SCORE,
    MAX_TOTAL_SCORE,
    DEFAULT_QUOTA,
    ENGINE_VERSION,
)


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class ScoreSet(BaseModel):
    """
    Subject scores of one candidate.
    Out-of-range scores are rejected with a ValidationError.
    """
    physics: int = Field(ge=0, le=MAX_PHYSICS_SCORE)
    chemistry: int = Field(ge=0, le=MAX_CHEMISTRY_SCORE)
    biology: int = Field(ge=0, le=MAX_BIOLOGY_SCORE)

    class Config:
        frozen = True

    @property
    def total(self) -> int:
        return self.physics + self.chemistry + self.biology


class Institution(BaseModel):
    """
    Catalog entry for one college.
    Supplied by the catalog provider; treated as read-only reference data.
    """
    name: str
    location: str = ""  # state
    type: Optional[InstitutionType] = None
    quota: Quota = Field(default=DEFAULT_QUOTA, validate_default=True)
    cutoff_ranks: Dict[str, Optional[int]] = Field(default_factory=dict)
    fees: Optional[str] = None
    seats: Optional[int] = Field(default=None, ge=0)

    class Config:
        frozen = True
        use_enum_values = True

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any):
        if value is None or value == "":
            return None
        parsed = InstitutionType.parse(value)
        if parsed is None:
            raise ValueError(f"Unknown institution type: {value!r}")
        return parsed

    @field_validator("quota", mode="before")
    @classmethod
    def _normalize_quota(cls, value: Any):
        if value is None or value == "":
            return DEFAULT_QUOTA
        parsed = Quota.parse(value)
        if parsed is None:
            raise ValueError(f"Unknown quota: {value!r}")
        return parsed

    @field_validator("cutoff_ranks", mode="before")
    @classmethod
    def _normalize_cutoff_keys(cls, value: Any):
        if value is None:
            return {}
        normalized = {}
        for key, rank in dict(value).items():
            category = Category.parse(key)
            normalized[category.value if category else str(key)] = rank
        return normalized

    def cutoff_for(self, category) -> Optional[int]:
        """
        Cutoff rank for a category, or None when the college publishes none.
        A stored cutoff of 0 counts as missing.
        """
        parsed = Category.parse(category)
        if parsed is None:
            return None
        cutoff = self.cutoff_ranks.get(parsed.value)
        return cutoff or None


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class RankEstimate(BaseModel):
    """Estimated rank range and percentile for one score set."""
    expected_rank: int = Field(ge=1)
    min_rank: int
    max_rank: int
    percentile: float = Field(ge=0.0, le=100.0)

    # Display context
    total_score: int = Field(ge=0, le=MAX_TOTAL_SCORE)
    category: str

    class Config:
        frozen = True


class RankOutlook(BaseModel):
    """Overall admission outlook for a rank, before looking at any college."""
    label: str
    chance: int = Field(ge=0, le=100)

    class Config:
        frozen = True


class Recommendation(BaseModel):
    """Single college recommendation with its banded admission chance."""
    institution: Institution
    cutoff_rank: int
    admission_chance: int = Field(ge=0, le=95)

    class Config:
        frozen = True

    @property
    def name(self) -> str:
        return self.institution.name

    @property
    def location(self) -> str:
        return self.institution.location


class RecommendationGroups(BaseModel):
    """
    Convenience views over one sorted recommendation list.
    Every view preserves the order of `all`.
    """
    all: List[Recommendation] = Field(default_factory=list)
    high_chance: List[Recommendation] = Field(default_factory=list)
    good_chance: List[Recommendation] = Field(default_factory=list)
    moderate_chance: List[Recommendation] = Field(default_factory=list)
    home_state: List[Recommendation] = Field(default_factory=list)
    by_type: Dict[str, List[Recommendation]] = Field(default_factory=dict)
    by_quota: Dict[str, List[Recommendation]] = Field(default_factory=dict)


class PredictionOutput(BaseModel):
    """
    Output contract for the prediction engine.
    Contains the rank estimate, the sorted recommendations and their views.
    """
    # Request tracking
    request_id: Optional[str] = None

    rank_estimate: Optional[RankEstimate] = None
    outlook: Optional[RankOutlook] = None
    recommendations: List[Recommendation] = Field(default_factory=list)
    groups: Optional[RecommendationGroups] = None

    # Summary Statistics
    total_colleges_evaluated: int = 0
    total_recommended: int = 0

    # Processing metadata
    processing_time_ms: Optional[float] = None
    engine_version: str = ENGINE_VERSION

    # Warnings/Notes
    warnings: List[str] = Field(default_factory=list)


class CatalogStatistics(BaseModel):
    """Counts over a college catalog."""
    total: int = 0
    by_type: Dict[str, int] = Field(default_factory=dict)
    by_quota: Dict[str, int] = Field(default_factory=dict)
    by_location: Dict[str, int] = Field(default_factory=dict)


# =============================================================================
# CUTOFF HISTORY
# =============================================================================

class CutoffYear(BaseModel):
    """Closing rank (and matching score) of one admission year."""
    year: int
    cutoff: int
    score: Optional[int] = None


class CutoffHistory(BaseModel):
    """Multi-year closing ranks of one college for one category."""
    name: str
    location: str = ""
    years: List[CutoffYear] = Field(default_factory=list)
    trend: Optional[Trend] = None
    predicted_cutoff: Optional[int] = None

    class Config:
        use_enum_values = True

    @field_validator("years")
    @classmethod
    def _chronological(cls, years: List[CutoffYear]) -> List[CutoffYear]:
        return sorted(years, key=lambda y: y.year)


class TrendAnalysis(BaseModel):
    """Summary of cutoff movement across a set of colleges."""
    total_colleges: int = 0
    increasing_trend: int = 0
    decreasing_trend: int = 0
    stable_trend: int = 0
    average_increase: int = 0
