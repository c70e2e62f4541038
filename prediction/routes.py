"""
Prediction API Routes

Exposes the rank estimator and college matcher via REST API.
"""

import logging
from typing import Optional, Dict, Any
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from db import get_db
from .logic.contracts import ScoreSet, PredictionOutput, Recommendation
from .logic.constants import SortKey, ENGINE_VERSION
from .logic.rank_estimator import estimate_rank, rank_outlook
from .logic.matcher import chance_label
from .logic.runner import (
    run_prediction,
    run_matching,
    get_catalog_statistics,
    get_recommendations_simple,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/predictions", tags=["predictions"])


# =============================================================================
# REQUEST/RESPONSE SCHEMAS
# =============================================================================

class RankRequest(BaseModel):
    """Request body for the rank estimate endpoint."""
    scores: ScoreSet = Field(
        ...,
        description="Subject scores (physics/chemistry out of 180, biology out of 360)",
        examples=[{"physics": 170, "chemistry": 170, "biology": 340}],
    )
    category: str = Field(default="General", description="General / OBC / SC / ST / EWS")


class CollegeMatchRequest(BaseModel):
    """Request body for matching a known rank against the catalog."""
    rank: int = Field(..., ge=1, description="All-India rank")
    category: str = Field(default="General")
    state: str = Field(default="All", description="State name or 'All'")
    quota: str = Field(default="All", description="Quota label or 'All'")
    home_state: Optional[str] = Field(default=None, description="Candidate's home state")
    sort_by: SortKey = Field(default=SortKey.CUTOFF)


class PredictionRequest(BaseModel):
    """Request body for the full score -> colleges prediction."""
    scores: ScoreSet
    category: str = Field(default="General")
    state: str = Field(default="All")
    quota: str = Field(default="All")
    home_state: Optional[str] = None
    format: str = Field(
        default="full",
        description="Response format: 'full' (complete output) or 'simple' (list only)"
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/rank", summary="Estimate rank from subject scores")
def predict_rank(request: RankRequest):
    """
    Estimate the expected rank, rank range and percentile, plus the overall
    admission outlook for the expected rank.

    Unknown categories use the General adjustment.
    """
    estimate = estimate_rank(request.scores, request.category)
    return {
        **estimate.model_dump(),
        "outlook": rank_outlook(estimate.expected_rank).model_dump(),
    }


@router.post("/colleges", summary="Match a rank against the college catalog")
def match_colleges(
    request: CollegeMatchRequest,
    db: Session = Depends(get_db)
):
    """
    List colleges reachable with a given rank, with banded admission chances.

    **Response:**
    - Recommendations sorted by `sort_by` (cutoff rank ascending by default)
    - Chance-band, type, quota and home-state views
    """
    try:
        output = run_matching(
            db,
            request.rank,
            request.category,
            state_filter=request.state,
            quota_filter=request.quota,
            home_state=request.home_state,
            sort_by=request.sort_by,
        )
        return _serialize_output(output)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("College matching failed")
        return JSONResponse(status_code=500, content={"error": str(e)})


@router.post("", summary="Predict rank and matching colleges")
@router.post("/", summary="Predict rank and matching colleges", include_in_schema=False)
def predict(
    request: PredictionRequest,
    db: Session = Depends(get_db)
):
    """
    Estimate the rank from scores, then match the expected rank against the
    stored college catalog.

    **Request Body:**
    - `scores`: physics, chemistry, biology
    - `category`: General / OBC / SC / ST / EWS
    - `state` / `quota`: filters, 'All' for none
    - `home_state`: for the home-state view
    - `format`: 'full' or 'simple'
    """
    try:
        output = run_prediction(
            db,
            request.scores,
            request.category,
            state_filter=request.state,
            quota_filter=request.quota,
            home_state=request.home_state,
        )

        if request.format == "simple":
            results = get_recommendations_simple(output)
            return {
                "rank_estimate": output.rank_estimate.model_dump(),
                "outlook": output.outlook.model_dump(),
                "recommendations": results,
                "count": len(results),
            }

        return _serialize_output(output)

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Prediction failed")
        return JSONResponse(status_code=500, content={"error": str(e)})


@router.get("/catalog/stats", summary="College catalog statistics")
def catalog_stats(db: Session = Depends(get_db)):
    """Counts of stored colleges by type, quota and state."""
    return get_catalog_statistics(db).model_dump()


def _serialize_output(output: PredictionOutput) -> Dict[str, Any]:
    """Convert PredictionOutput to a JSON-serializable dict."""
    groups = output.groups
    return {
        "request_id": output.request_id,
        "rank_estimate": output.rank_estimate.model_dump() if output.rank_estimate else None,
        "outlook": output.outlook.model_dump() if output.outlook else None,
        "summary": {
            "total_evaluated": output.total_colleges_evaluated,
            "total_recommended": output.total_recommended,
            "processing_time_ms": output.processing_time_ms,
        },
        "recommendations": [_serialize_recommendation(r) for r in output.recommendations],
        "groups": {
            "high_chance": [r.name for r in groups.high_chance],
            "good_chance": [r.name for r in groups.good_chance],
            "moderate_chance": [r.name for r in groups.moderate_chance],
            "home_state": [r.name for r in groups.home_state],
            "by_type": {k: [r.name for r in v] for k, v in groups.by_type.items()},
            "by_quota": {k: [r.name for r in v] for k, v in groups.by_quota.items()},
        } if groups else None,
        "warnings": output.warnings,
        "engine_version": output.engine_version,
    }


def _serialize_recommendation(rec: Recommendation) -> Dict[str, Any]:
    """Convert a Recommendation to a JSON-serializable dict."""
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
        "chance_label": chance_label(rec.admission_chance),
    }


# =============================================================================
# HEALTH CHECK
# =============================================================================

@router.get("/health", summary="Prediction engine health check")
def health_check():
    """Check if prediction engine is operational."""
    return {"status": "ok", "engine": "prediction", "version": ENGINE_VERSION}
