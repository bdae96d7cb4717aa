"""Single-session API routes."""

from typing import List, Optional

from fastapi import APIRouter

from ...analysis.intervals import analyze_interval_session, summarize_session
from ...analysis.segments import extract_segments
from ...metrics.time_format import format_session_metric
from ..schemas import (
    IntervalAnalysisResponse,
    SegmentResponse,
    SessionRequest,
    SessionSummaryResponse,
)

router = APIRouter()


@router.post("/segments", response_model=List[SegmentResponse])
async def segments(request: SessionRequest):
    """Performance segments of one session (long-run correction applied)."""
    return [SegmentResponse.model_validate(s) for s in extract_segments(request.session)]


@router.post("/intervals", response_model=Optional[IntervalAnalysisResponse])
async def intervals(request: SessionRequest):
    """Pacing consistency of a structured session; null when it has no reps."""
    analysis = analyze_interval_session(request.session)
    if analysis is None:
        return None
    return IntervalAnalysisResponse.model_validate(analysis)


@router.post("/summary", response_model=SessionSummaryResponse)
async def summary(request: SessionRequest):
    session = request.session
    return SessionSummaryResponse(
        session_id=session.id,
        summary=summarize_session(session),
        metric=format_session_metric(session.distance, session.duration, session.kind),
    )
