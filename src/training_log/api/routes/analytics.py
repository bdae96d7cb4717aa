"""Prediction, fitness, alert and dashboard API routes."""

from typing import List

from fastapi import APIRouter

from ...analysis.alerts import generate_training_alerts
from ...analysis.prediction import (
    fitness_score_from_predictions,
    generate_race_predictions,
    predict_goal,
    predicted_5k_trend,
)
from ...analysis.races import calculate_race_stats
from ...metrics.fitness import calculate_training_stress, summarize_training_stress
from ...metrics.load import summarize_period
from ..schemas import (
    AlertResponse,
    AlertsRequest,
    GoalPredictionResponse,
    PeriodSummaryRequest,
    PeriodSummaryResponse,
    PredictionRequest,
    PredictionsResponse,
    RacePredictionResponse,
    RaceStatsResponse,
    SessionsRequest,
    StressPointResponse,
    StressRequest,
    StressResponse,
    TrendPointResponse,
)

router = APIRouter()


@router.post("/predictions", response_model=PredictionsResponse)
async def predictions(request: PredictionRequest):
    """
    Race predictions for the catalogue distances.

    Includes the fitness score, a prediction per goal and the peak
    predicted 5K trend.
    """
    race_predictions = generate_race_predictions(request.sessions)
    goals = []
    for goal in request.goals:
        prediction = predict_goal(goal, race_predictions)
        goals.append(
            GoalPredictionResponse(
                goal_id=goal.id,
                prediction=RacePredictionResponse.model_validate(prediction) if prediction else None,
            )
        )

    return PredictionsResponse(
        predictions=[RacePredictionResponse.model_validate(p) for p in race_predictions],
        fitness_score=fitness_score_from_predictions(race_predictions),
        goals=goals,
        trend=[
            TrendPointResponse(date=point["date"], predicted_5k=point["predicted_5k"])
            for point in predicted_5k_trend(request.sessions)
        ],
    )


@router.post("/fitness/stress", response_model=StressResponse)
async def training_stress(request: StressRequest):
    """Daily fitness, fatigue and form up to ``today``."""
    points = calculate_training_stress(request.sessions, today=request.today)
    summary = summarize_training_stress(points) or {}
    if request.days:
        points = points[-request.days:]

    return StressResponse(
        points=[StressPointResponse.model_validate(p) for p in points],
        band=summary.get("band"),
        band_description=summary.get("band_description"),
        recommendation=summary.get("recommendation"),
    )


@router.post("/alerts", response_model=List[AlertResponse])
async def alerts(request: AlertsRequest):
    """Advisory alerts for the most recent sessions."""
    return [
        AlertResponse.model_validate(alert)
        for alert in generate_training_alerts(request.sessions, now=request.now)
    ]


@router.post("/periods/summary", response_model=PeriodSummaryResponse)
async def period_summary(request: PeriodSummaryRequest):
    """Distance, duration, load and averages for this week, month or season."""
    summary = summarize_period(request.sessions, request.scope, now=request.now, season=request.season)
    return PeriodSummaryResponse.model_validate(summary)


@router.post("/races/stats", response_model=RaceStatsResponse)
async def race_stats(request: SessionsRequest):
    """Wins, podiums, top-10 finishes and PBs across all races."""
    return RaceStatsResponse.model_validate(calculate_race_stats(request.sessions))
