"""Record reconciliation API routes."""

from fastapi import APIRouter

from ...analysis.records import apply_personal_best, detect_best_efforts, reconcile_records
from ..schemas import BestEffortRequest, BestEffortResponse, ReconcileRequest, ReconcileResponse

router = APIRouter()


@router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile(request: ReconcileRequest):
    """
    Recompute titles, Personal Best and Season Best flags.

    Returns every session newest-first with the derived fields rewritten.
    """
    sessions = reconcile_records(
        request.sessions,
        profile_pbs=request.profile_pbs,
        seasons=request.seasons,
        active_season_start=request.active_season_start,
        today=request.today,
    )
    return ReconcileResponse(
        sessions=sessions,
        personal_best_count=sum(s.is_personal_best for s in sessions),
        season_best_count=sum(s.is_season_best for s in sessions),
    )


@router.post("/best-efforts", response_model=BestEffortResponse)
async def best_efforts(request: BestEffortRequest):
    """Check a session being saved for a PB or SB and return the updated profile PBs."""
    result = detect_best_efforts(
        request.session,
        request.history,
        profile_pbs=request.profile_pbs,
        season_start=request.season_start,
        today=request.today,
    )
    return BestEffortResponse(
        is_personal_best=result.is_personal_best,
        is_season_best=result.is_season_best,
        distance_name=result.distance_name,
        seconds=result.seconds,
        updated_pbs=apply_personal_best(request.profile_pbs, result, request.session),
    )
