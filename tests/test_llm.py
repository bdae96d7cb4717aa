"""Tests for the coaching context builder and coach service."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from training_log.exceptions import CoachRateLimitError, CoachServiceError
from training_log.llm import CoachService, build_coach_context
from training_log.llm.coach import COACH_SYSTEM_PROMPT, RATE_LIMIT_MESSAGE, UNAVAILABLE_MESSAGE
from training_log.models import Goal, PersonalBest, RacePrediction, SessionKind, UserProfile


@pytest.fixture
def profile():
    return UserProfile(
        name="Sam",
        age=34,
        preferred_race="10K",
        pbs=[PersonalBest(distance="5K", time="18:00")],
        injuries=["Left achilles"],
    )


class TestBuildCoachContext:
    """Tests for build_coach_context."""

    def test_empty(self):
        assert build_coach_context() == ""

    def test_athlete_section(self, profile):
        context = build_coach_context(profile=profile)

        assert context.startswith("ATHLETE:")
        assert "Name: Sam" in context
        assert "Age: 34" in context
        assert "Active injuries: Left achilles" in context
        assert "Personal bests: 5K 18:00" in context

    def test_fitness_section(self):
        context = build_coach_context(
            fitness={"fitness": 42.04, "fatigue": 50.0, "form": -7.96, "band_description": "Maintenance"},
        )
        assert "Fitness (42-day): 42.0" in context
        assert "Form: -8.0 (Maintenance)" in context

    def test_only_usable_predictions(self):
        predictions = [
            RacePrediction("5000m", 5.0, 1140.0, "19:00", "3:48/km", ["Tempo"]),
            RacePrediction("10K", 10.0, 0.0, "-", "-"),
        ]
        context = build_coach_context(predictions=predictions)

        assert "5000m: 19:00 (3:48/km)" in context
        assert "10K" not in context

    def test_goals_are_capped(self):
        goals = [
            Goal(id=f"g{i}", name=f"Goal {i}", target_time="40:00", target_distance=10, deadline="2024-10-01")
            for i in range(5)
        ]
        context = build_coach_context(goals=goals)

        assert "Goal 2: 10km in 40:00 by 2024-10-01" in context
        assert "Goal 3" not in context

    def test_recent_sessions_newest_first(self, make_session):
        sessions = [
            make_session(SessionKind.EASY, datetime(2024, 6, d), 8.0, 42.0, avg_hr=140)
            for d in range(1, 13)
        ]
        sessions.append(
            make_session(SessionKind.RACE, datetime(2024, 6, 20), 5.0, 18.0, is_personal_best=True)
        )
        lines = build_coach_context(sessions=sessions).splitlines()

        assert lines[0] == "RECENT SESSIONS:"
        assert len(lines) == 11
        assert lines[1].startswith("  - 2024-06-20 Race: 5km in 18min")
        assert lines[1].endswith("[PB]")
        assert "avg HR 140" in lines[2]


class TestCoachService:
    """Tests for CoachService."""

    def test_analyze_session(self, make_session, profile):
        complete = MagicMock(return_value="  Solid session.  ")
        coach = CoachService(complete)

        result = coach.analyze_session(make_session(SessionKind.TEMPO, notes="Felt strong"), profile)

        assert result == "Solid session."
        system, prompt = complete.call_args.args
        assert system == COACH_SYSTEM_PROMPT
        assert "Session notes: Felt strong" in prompt
        assert "ATHLETE:" in prompt

    def test_weekly_insights_mentions_preferred_race(self, make_session, profile):
        complete = MagicMock(return_value="Insights")
        CoachService(complete).weekly_insights([make_session()], profile)

        assert "needed for the 10K" in complete.call_args.args[1]

    def test_ask_with_context(self):
        complete = MagicMock(return_value="Run easy.")
        coach = CoachService(complete, system_prompt="Be brief.")

        assert coach.ask("Should I rest?", context="FITNESS: ok") == "Run easy."
        complete.assert_called_once_with("Be brief.", "FITNESS: ok\n\nQuestion: Should I rest?")

    def test_rate_limit_message(self, make_session):
        complete = MagicMock(side_effect=CoachRateLimitError(retry_after=30))
        assert CoachService(complete).analyze_session(make_session()) == RATE_LIMIT_MESSAGE

    def test_service_error_fallback(self, make_session):
        complete = MagicMock(side_effect=CoachServiceError("timeout"))

        assert CoachService(complete).analyze_session(make_session()) == "Could not generate analysis."
        assert CoachService(complete).ask("Why?") == UNAVAILABLE_MESSAGE

    def test_empty_reply_falls_back(self):
        assert CoachService(MagicMock(return_value="")).ask("Why?") == UNAVAILABLE_MESSAGE

    def test_unexpected_errors_propagate(self):
        complete = MagicMock(side_effect=RuntimeError("boom"))
        with pytest.raises(RuntimeError):
            CoachService(complete).ask("Why?")
