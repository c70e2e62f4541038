"""
Prediction Engine Constants

Defines the scoring curves, category multipliers, admission-chance bands and
the closed enumerations used by the rank estimator and the college matcher.
All values are frozen lookup tables; they are reproduced exactly and must not
be smoothed or re-derived.
"""

from fractions import Fraction
from enum import Enum
from typing import Dict, List, Optional, Tuple


# =============================================================================
# ENUMS
# =============================================================================

class Category(str, Enum):
    """Reservation category of a candidate."""
    GENERAL = "General"
    OBC = "OBC"
    SC = "SC"
    ST = "ST"
    EWS = "EWS"

    @classmethod
    def parse(cls, value) -> Optional["Category"]:
        """Case-insensitive lookup by label. Returns None when unrecognized."""
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        return _CATEGORY_LOOKUP.get(str(value).strip().lower())


class Quota(str, Enum):
    """Admission channel a college's seats are allocated under."""
    ALL_INDIA = "All India Quota"
    STATE = "State Quota"
    MANAGEMENT = "Management Quota"
    NRI = "NRI Quota"

    @classmethod
    def parse(cls, value) -> Optional["Quota"]:
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        return _QUOTA_LOOKUP.get(_squash(value))


class InstitutionType(str, Enum):
    """Ownership type of a college."""
    GOVERNMENT = "Government"
    PRIVATE = "Private"
    DEEMED_UNIVERSITY = "Deemed University"

    @classmethod
    def parse(cls, value) -> Optional["InstitutionType"]:
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        return _TYPE_LOOKUP.get(_squash(value))


class SortKey(str, Enum):
    """Orderings offered for a recommendation list."""
    CUTOFF = "cutoff"
    CHANCE = "chance"
    NAME = "name"
    LOCATION = "location"
    FEES = "fees"


class Trend(str, Enum):
    """Direction of a college's closing rank across years."""
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


def _squash(value) -> str:
    """Lowercase and drop separators so 'AllIndia' and 'All India Quota' compare equal."""
    return "".join(ch for ch in str(value).lower() if ch.isalnum())


_CATEGORY_LOOKUP: Dict[str, Category] = {c.value.lower(): c for c in Category}

_QUOTA_LOOKUP: Dict[str, Quota] = {
    "allindiaquota": Quota.ALL_INDIA,
    "allindia": Quota.ALL_INDIA,
    "aiq": Quota.ALL_INDIA,
    "statequota": Quota.STATE,
    "state": Quota.STATE,
    "managementquota": Quota.MANAGEMENT,
    "management": Quota.MANAGEMENT,
    "nriquota": Quota.NRI,
    "nri": Quota.NRI,
}

_TYPE_LOOKUP: Dict[str, InstitutionType] = {
    "government": InstitutionType.GOVERNMENT,
    "govt": InstitutionType.GOVERNMENT,
    "private": InstitutionType.PRIVATE,
    "deemeduniversity": InstitutionType.DEEMED_UNIVERSITY,
    "deemed": InstitutionType.DEEMED_UNIVERSITY,
}


# =============================================================================
# SCORE LIMITS
# =============================================================================

MAX_PHYSICS_SCORE = 180
MAX_CHEMISTRY_SCORE = 180
MAX_BIOLOGY_SCORE = 360
MAX_TOTAL_SCORE = 720


# =============================================================================
# RANK CURVE
# =============================================================================

# (score_floor, rank_floor, rank_per_point, band_top)
# A total at or above score_floor gets rank_floor + rank_per_point * (band_top - total).
RANK_BANDS: List[Tuple[int, int, int, int]] = [
    (650, 500, 10, 720),
    (600, 1000, 50, 650),
    (550, 5000, 100, 600),
    (500, 15000, 200, 550),
    (450, 50000, 400, 500),
    (400, 100000, 800, 450),
    (350, 200000, 1000, 400),
    (300, 400000, 1500, 350),
]

# Totals below the last floor
RANK_TAIL: Tuple[int, int, int] = (600000, 2000, 300)


# =============================================================================
# CATEGORY ADJUSTMENT
# =============================================================================

CATEGORY_MULTIPLIERS: Dict[Category, float] = {
    Category.GENERAL: 1.0,
    Category.EWS: 0.95,
    Category.OBC: 0.85,
    Category.SC: 0.7,
    Category.ST: 0.65,
}

DEFAULT_CATEGORY_MULTIPLIER = 1.0

# Spread of the rank range around the expected rank
MIN_RANK_FACTOR = 0.8
MAX_RANK_FACTOR = 1.2


# =============================================================================
# PERCENTILE CURVE
# =============================================================================

# (band_start, floor, multiplier, cap) applied to the raw score percentage
PERCENTILE_BANDS: List[Tuple[float, float, float, float]] = [
    (90, 85, 1.5, 99.9),
    (80, 70, 1.5, 95),
    (70, 55, 1.5, 85),
    (60, 40, 1.5, 75),
    (50, 25, 1.5, 65),
]

LOW_PERCENTILE_MULTIPLIER = 0.5
LOW_PERCENTILE_FLOOR = 1
MAX_PERCENTILE = 99.9


# =============================================================================
# REVERSE CURVE (rank -> approximate score)
# =============================================================================

# (rank_ceiling, score_floor, ranks_per_point)
SCORE_FROM_RANK_BANDS: List[Tuple[int, int, int]] = [
    (1000, 650, 10),
    (5000, 600, 50),
    (15000, 550, 100),
    (50000, 500, 200),
    (100000, 450, 400),
]

# Beyond the last ceiling: max(300, 400 - (rank - 100000) / 1000)
SCORE_FROM_RANK_TAIL: Tuple[int, int, int, int] = (100000, 400, 1000, 300)


# =============================================================================
# ADMISSION CHANCE
# =============================================================================

# rank <= cutoff * ratio -> chance; checked in order, bounds inclusive.
# Exact ratios so a rank on a band edge (63 vs 90 at 0.7) stays in the band.
ADMISSION_CHANCE_BANDS: List[Tuple[Fraction, int]] = [
    (Fraction("0.7"), 95),
    (Fraction("0.8"), 85),
    (Fraction("0.9"), 75),
    (Fraction("1.0"), 65),
    (Fraction("1.1"), 50),
    (Fraction("1.2"), 35),
    (Fraction("1.3"), 25),
    (Fraction("1.5"), 15),
    (Fraction("2.0"), 5),
]

# Derived view thresholds
HIGH_CHANCE_THRESHOLD = 70
GOOD_CHANCE_THRESHOLD = 40
MODERATE_CHANCE_THRESHOLD = 20

# Display labels, highest threshold first
CHANCE_LABELS: List[Tuple[int, str]] = [
    (80, "High"),
    (60, "Good"),
    (40, "Moderate"),
    (0, "Low"),
]

# Overall outlook from the rank alone: (max rank, label, chance), best first
RANK_OUTLOOK_BANDS: List[Tuple[int, str, int]] = [
    (1000, "Excellent", 95),
    (5000, "Very Good", 85),
    (15000, "Good", 70),
    (50000, "Moderate", 50),
]
RANK_OUTLOOK_TAIL: Tuple[str, int] = ("Low", 25)


# =============================================================================
# FILTERS & DEFAULTS
# =============================================================================

# Filter values that mean "do not filter"
ALL_STATES_VALUES = frozenset({"all", "all states"})
ALL_QUOTAS_VALUES = frozenset({"all", "all quotas"})

DEFAULT_QUOTA = Quota.ALL_INDIA
DEFAULT_TOP_COLLEGES_LIMIT = 10

# Engine output
ENGINE_VERSION = "1.0.0"
LOW_RECOMMENDATION_COUNT = 5
