"""
Data Adapter for the Prediction Engine

Reads the `colleges` table and transforms rows into Institution contracts for
the matcher.

This is a pure READ + TRANSFORM layer:
- NO rank estimation
- NO matching/banding
- NO DB writes
"""

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..models import College
from .contracts import Institution
from .constants import ALL_STATES_VALUES

logger = logging.getLogger(__name__)


def _parse_cutoff_ranks(raw: Any) -> Dict[str, Optional[int]]:
    """
    Normalize the stored cutoff map.

    Some drivers hand JSON columns back as text; values may be strings or
    blanks from spreadsheet imports.
    """
    if raw is None:
        return {}
    if isinstance(raw, str):
        raw = json.loads(raw) if raw.strip() else {}
    if not isinstance(raw, dict):
        raise ValueError(f"cutoff_ranks must be an object, got {type(raw).__name__}")

    return {category: _parse_cutoff_value(category, value) for category, value in raw.items()}


def _parse_cutoff_value(category: str, value: Any) -> Optional[int]:
    """
    One cutoff entry as a whole rank, or None when it is blank or unusable.

    Fractional ranks ("1000.9") are rejected rather than rounded: a closing
    rank is always a whole number, so a fraction means the cell is wrong.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        logger.warning(f"Ignoring non-numeric cutoff for {category}: {value!r}")
        return None

    try:
        number = float(str(value).strip())
    except ValueError:
        logger.warning(f"Ignoring non-numeric cutoff for {category}: {value!r}")
        return None

    if not number.is_integer():
        logger.warning(f"Ignoring fractional cutoff for {category}: {value!r}")
        return None
    return int(number)


def college_to_institution(college: College) -> Institution:
    """
    Convert a College row to an Institution.

    Raises:
        ValueError / ValidationError: if the row cannot be normalized
    """
    return Institution(
        name=(college.name or "").strip(),
        location=(college.location or "").strip(),
        type=college.type,
        quota=college.quota,
        cutoff_ranks=_parse_cutoff_ranks(college.cutoff_ranks),
        fees=college.fees,
        seats=college.seats,
    )


def fetch_catalog(
    db: Session,
    state_filter: Optional[str] = None,
    limit: Optional[int] = None
) -> List[Institution]:
    """
    Load the college catalog as Institution contracts, ordered by name.

    Args:
        db: Database session
        state_filter: Restrict to one state at SQL level ("All" = no filter)
        limit: Max rows to read

    Returns:
        Institutions for every row that normalizes cleanly; bad rows are
        logged and skipped
    """
    query = db.query(College)

    if state_filter and state_filter.strip().lower() not in ALL_STATES_VALUES:
        query = query.filter(College.location == state_filter)

    query = query.order_by(College.name)
    if limit:
        query = query.limit(limit)

    rows = query.all()
    logger.info(f"📚 Colleges fetched from DB: {len(rows)}")

    catalog: List[Institution] = []
    for row in rows:
        try:
            catalog.append(college_to_institution(row))
        except (ValueError, ValidationError) as e:
            logger.warning(f"Skipping college {row.id} ({row.name}): {e}")
            continue

    return catalog
