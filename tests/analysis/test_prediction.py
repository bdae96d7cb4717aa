"""Tests for the race performance predictor."""

from datetime import datetime, timedelta

import pytest

from training_log.analysis.prediction import (
    KIND_CATEGORIES,
    RACE_TARGETS,
    TrainingCategory,
    blend_components,
    calculate_fitness_score,
    category_for_session,
    fitness_score_from_predictions,
    generate_race_predictions,
    predict_goal,
    predict_time,
    predicted_5k_trend,
)
from training_log.models import Goal, SessionKind


def _by_name(predictions):
    return {p.distance_name: p for p in predictions}


class TestPredictTime:
    """Tests for Riegel extrapolation."""

    def test_doubling_distance(self):
        """A 20:00 5K extrapolates to 1200 x 2^1.06 for 10K."""
        result = predict_time(1200, 5, 10)
        assert result == pytest.approx(1200 * 2 ** 1.06)
        assert result == pytest.approx(2500, abs=5)

    def test_same_distance(self):
        assert predict_time(1200, 5, 5) == pytest.approx(1200)

    @pytest.mark.parametrize("args", [(0, 5, 10), (1200, 0, 10), (1200, 5, 0)])
    def test_unusable_inputs(self, args):
        assert predict_time(*args) == 0.0


class TestCategories:
    """Tests for the kind to category table."""

    def test_every_kind_is_mapped(self):
        assert set(KIND_CATEGORIES) == set(SessionKind)

    def test_weights_sum_to_one(self):
        for target in RACE_TARGETS:
            assert sum(target.weights.values()) == pytest.approx(1.0), target.name

    @pytest.mark.parametrize(
        "distance,category",
        [
            (0.8, TrainingCategory.SPEED),
            (3.0, TrainingCategory.INTERVAL),
            (10.0, TrainingCategory.THRESHOLD),
            (21.1, TrainingCategory.TEMPO),
        ],
    )
    def test_race_category_by_distance(self, make_session, distance, category):
        assert category_for_session(make_session(SessionKind.RACE, distance=distance)) == category

    def test_kinds_without_category(self, make_session):
        for kind in (SessionKind.EASY, SessionKind.HILLS, SessionKind.CYCLE, SessionKind.RECOVERY):
            assert category_for_session(make_session(kind)) is None

    def test_long_run_is_mileage(self, make_session):
        assert category_for_session(make_session(SessionKind.LONG)) == TrainingCategory.MILEAGE


class TestBlend:
    def test_missing_categories_do_not_dilute(self):
        weights = {TrainingCategory.INTERVAL: 0.35, TrainingCategory.TEMPO: 0.15, TrainingCategory.SPEED: 0.5}
        components = {TrainingCategory.INTERVAL: 1100.0, TrainingCategory.TEMPO: 1200.0}
        assert blend_components(components, weights) == pytest.approx((0.35 * 1100 + 0.15 * 1200) / 0.5)

    def test_nothing_usable(self):
        assert blend_components({}, {TrainingCategory.SPEED: 1.0}) == 0.0


class TestGenerateRacePredictions:
    """Tests for generate_race_predictions."""

    def test_no_sessions(self):
        predictions = generate_race_predictions([])

        assert [p.distance_name for p in predictions] == [t.name for t in RACE_TARGETS]
        for prediction in predictions:
            assert not prediction.has_prediction
            assert prediction.predicted_time == "-"
            assert prediction.formatted_pace == "-"

    def test_easy_runs_give_no_prediction(self, make_session):
        predictions = generate_race_predictions([make_session(SessionKind.EASY, distance=10, duration=50)])
        assert not any(p.has_prediction for p in predictions)

    def test_renormalized_two_component_blend(self, make_session):
        """Only Interval and Tempo evidence: the 5000m blend is their weighted mean."""
        interval = make_session(
            SessionKind.INTERVAL, datetime(2024, 6, 10),
            intervals=[{"reps": 3, "distance": 2000, "duration": "6:40"}],
        )
        tempo = make_session(SessionKind.TEMPO, datetime(2024, 6, 12), distance=6.0, duration=22.0)

        five_k = _by_name(generate_race_predictions([interval, tempo]))["5000m"]

        interval_5k = predict_time(400, 2.0, 5.0)
        tempo_5k = predict_time(22 * 60, 6.0, 5.0)
        expected = (0.35 * interval_5k + 0.15 * tempo_5k) / (0.35 + 0.15)

        assert five_k.predicted_seconds == pytest.approx(expected)
        assert five_k.components == ["Interval", "Tempo"]
        assert five_k.formatted_pace.endswith("/km")

    def test_most_recent_valid_session_wins(self, make_session):
        older = make_session(SessionKind.TEMPO, datetime(2024, 5, 1), distance=8.0, duration=30.0)
        newer = make_session(SessionKind.TEMPO, datetime(2024, 6, 1), distance=8.0, duration=34.0)
        too_short = make_session(SessionKind.TEMPO, datetime(2024, 6, 20), distance=2.5, duration=9.0)

        five_k = _by_name(generate_race_predictions([older, too_short, newer]))["5000m"]

        assert five_k.predicted_seconds == pytest.approx(predict_time(34 * 60, 8.0, 5.0))

    def test_fastest_qualifying_segment_of_the_session(self, make_session):
        session = make_session(
            SessionKind.INTERVAL,
            intervals=[
                {"reps": 1, "distance": 2000, "duration": "7:00"},
                {"reps": 1, "distance": 3000, "duration": "10:00"},
            ],
        )
        five_k = _by_name(generate_race_predictions([session]))["5000m"]

        expected = min(predict_time(420, 2.0, 5.0), predict_time(600, 3.0, 5.0))
        assert five_k.predicted_seconds == pytest.approx(expected)

    def test_speed_minimum_is_relaxed_for_1500(self, make_session):
        session = make_session(
            SessionKind.SPEED,
            intervals=[{"reps": 2, "distance": 1500, "duration": "4:30"}],
        )
        predictions = _by_name(generate_race_predictions([session]))

        assert predictions["1500m"].predicted_seconds == pytest.approx(270)
        assert not predictions["5000m"].has_prediction

    def test_long_run_potential_correction(self, make_session):
        long_run = make_session(SessionKind.LONG, distance=20.0, duration=100.0)
        five_k = _by_name(generate_race_predictions([long_run]))["5000m"]

        assert five_k.predicted_seconds == pytest.approx(predict_time(100 * 0.85 * 60, 20.0, 5.0))
        assert five_k.components == ["Mileage"]


class TestFitnessScore:
    def test_score_from_5k_time(self):
        assert calculate_fitness_score(19 * 60) == 27.0

    def test_zero_time(self):
        assert calculate_fitness_score(0) == 0.0

    def test_without_5k_prediction(self):
        assert fitness_score_from_predictions(generate_race_predictions([])) == 0.0

    def test_from_predictions(self, make_session):
        race = make_session(SessionKind.RACE, distance=5.0, duration=19.0)
        predictions = generate_race_predictions([race])
        # A 5 km race is Threshold evidence, the only component of the 5000m blend
        assert fitness_score_from_predictions(predictions) == 27.0


class TestPredicted5kTrend:
    def test_window_drops_old_sessions(self, make_session):
        start = datetime(2024, 1, 1)
        sessions = [
            make_session(SessionKind.RACE, start, distance=5.0, duration=19.0),
            make_session(SessionKind.EASY, start + timedelta(days=10), distance=8.0, duration=45.0),
            make_session(SessionKind.TEMPO, start + timedelta(days=60), distance=5.0, duration=21.0),
        ]
        trend = predicted_5k_trend(sessions)

        assert trend == [
            {"date": "2024-01-01", "predicted_5k": 1140.0},
            {"date": "2024-01-11", "predicted_5k": 1140.0},
            {"date": "2024-03-01", "predicted_5k": 1260.0},
        ]

    def test_no_markers(self, make_session):
        assert predicted_5k_trend([make_session(SessionKind.EASY)]) == []


class TestPredictGoal:
    def _goal(self, km):
        return Goal(id="g1", name="Autumn race", target_time="40:00", target_distance=km)

    def test_catalogue_distance(self, make_session):
        predictions = generate_race_predictions([make_session(SessionKind.TEMPO, distance=8.0, duration=30.0)])
        result = predict_goal(self._goal(10.0), predictions)
        assert result.distance_name == "10K"

    def test_extrapolates_from_5000m(self, make_session):
        predictions = generate_race_predictions([make_session(SessionKind.TEMPO, distance=8.0, duration=30.0)])
        five_k = _by_name(predictions)["5000m"]

        result = predict_goal(self._goal(8.0), predictions)

        assert result.distance_name == "8km"
        assert result.predicted_seconds == pytest.approx(predict_time(five_k.predicted_seconds, 5.0, 8.0))

    def test_without_predictions(self):
        assert predict_goal(self._goal(8.0), generate_race_predictions([])) is None
