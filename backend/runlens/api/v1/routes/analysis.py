"""
Analysis Routes

Endpoints for run/walk segment analysis:
- POST /analysis - Analyze streams supplied in the request body
- GET /activities/{activity_id}/analysis - Fetch streams from Strava and analyze
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from runlens.features.segments import (
    AnalysisRequest,
    AnalysisResponse,
    InvalidConfiguration,
    InvalidSample,
    Sample,
    SegmentClassifier,
    samples_from_streams,
)
from runlens.features.strava import StravaClient, StravaError
from runlens.api.v1.routes.strava import (
    get_strava_client,
    resolve_access_token,
    strava_http_error,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ANALYSIS_FAILED = "Could not analyze activity"


def _classifier(threshold_mps: Optional[float]) -> SegmentClassifier:
    try:
        if threshold_mps is None:
            return SegmentClassifier.from_settings()
        return SegmentClassifier(threshold_mps)
    except InvalidConfiguration as e:
        raise HTTPException(status_code=400, detail=str(e))


def _analyze(
    classifier: SegmentClassifier,
    samples: list[Sample],
    activity_id: Optional[int] = None,
    include_segments: bool = True
) -> AnalysisResponse:
    result = classifier.classify(samples)
    return AnalysisResponse.from_result(
        result,
        activity_id=activity_id,
        include_segments=include_segments
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/analysis", response_model=AnalysisResponse)
async def analyze_streams(
    request: AnalysisRequest,
    include_segments: bool = Query(default=True)
):
    """
    Analyze raw time/velocity streams.

    Empty streams return a zeroed result with has_data=false;
    malformed streams return 422, a bad threshold 400.
    """
    classifier = _classifier(request.threshold_mps)

    try:
        samples = samples_from_streams({
            "time": request.time,
            "velocity_smooth": request.velocity_smooth,
        })
        return _analyze(classifier, samples, include_segments=include_segments)
    except InvalidSample as e:
        logger.warning(f"Rejected streams payload: {e}")
        raise HTTPException(status_code=422, detail=f"{ANALYSIS_FAILED}: {e}")


@router.get("/activities/{activity_id}/analysis", response_model=AnalysisResponse)
async def analyze_activity(
    activity_id: int,
    request: Request,
    response: Response,
    threshold_mps: Optional[float] = Query(default=None),
    include_segments: bool = Query(default=True),
    client: StravaClient = Depends(get_strava_client)
):
    """
    Fetch an activity's streams from Strava and analyze them.

    Tokens are read from cookies; an expired access token is refreshed
    and the new one written back.
    """
    classifier = _classifier(threshold_mps)
    access_token = await resolve_access_token(request, response, client)

    try:
        streams = await client.get_activity_streams(access_token, activity_id)
    except StravaError as e:
        logger.error(f"Error fetching streams for activity {activity_id}: {e}")
        raise strava_http_error(
            e,
            not_found="Activity not found",
            failed="Failed to fetch activity streams"
        )

    try:
        samples = samples_from_streams(streams)
        return _analyze(classifier, samples, activity_id=activity_id, include_segments=include_segments)
    except InvalidSample as e:
        logger.warning(f"Activity {activity_id} has malformed streams: {e}")
        raise HTTPException(status_code=422, detail=f"{ANALYSIS_FAILED}: {e}")
