"""Tests for record reconciliation, best-effort detection and season bests."""

from datetime import datetime

import pytest

from training_log.analysis.records import (
    apply_personal_best,
    auto_title_label,
    calculate_season_bests,
    detect_best_efforts,
    reconcile_records,
    resolve_title_source,
)
from training_log.exceptions import ValidationError
from training_log.models import BestEffortResult, PersonalBest, Season, SessionKind, Surface, TitleSource

TODAY = datetime(2024, 6, 30)


def _by_id(sessions):
    return {s.id: s for s in sessions}


class TestTitleProvenance:
    """Tests for title provenance and labels."""

    def test_road_tempo_label(self, make_session):
        assert auto_title_label(make_session(SessionKind.TEMPO, surface=Surface.ROAD)) == "Road Tempo"
        assert auto_title_label(make_session(SessionKind.TEMPO, surface=Surface.TRACK)) == "Tempo"

    def test_legacy_titles_are_classified(self, make_session):
        assert resolve_title_source(make_session(title="")) == TitleSource.AUTO
        assert resolve_title_source(make_session(title="Easy Run 7")) == TitleSource.AUTO
        assert resolve_title_source(make_session(title="Sunset shakeout")) == TitleSource.MANUAL
        assert resolve_title_source(make_session(SessionKind.TEMPO, title="Road Tempo 3")) == TitleSource.AUTO

    def test_explicit_provenance_wins(self, make_session):
        session = make_session(title="Easy Run 9", title_source=TitleSource.MANUAL)
        assert resolve_title_source(session) == TitleSource.MANUAL


class TestReconcileTitles:
    """Tests for title renumbering."""

    def test_numbered_oldest_first_and_returned_newest_first(self, make_session):
        sessions = [
            make_session(date=datetime(2024, 5, 3), id="c"),
            make_session(date=datetime(2024, 5, 1), id="a"),
            make_session(date=datetime(2024, 5, 2), id="b"),
        ]
        result = reconcile_records(sessions, today=TODAY)

        assert [s.id for s in result] == ["c", "b", "a"]
        assert [s.title for s in result] == ["Easy Run 3", "Easy Run 2", "Easy Run 1"]
        assert all(s.title_source == TitleSource.AUTO for s in result)

    def test_manual_titles_are_kept_but_counted(self, make_session):
        sessions = [
            make_session(date=datetime(2024, 5, 1), id="a"),
            make_session(date=datetime(2024, 5, 2), id="b", title="Sunset shakeout"),
            make_session(date=datetime(2024, 5, 3), id="c", title="Easy Run 1"),
        ]
        result = _by_id(reconcile_records(sessions, today=TODAY))

        assert result["a"].title == "Easy Run 1"
        assert result["b"].title == "Sunset shakeout"
        assert result["b"].title_source == TitleSource.MANUAL
        assert result["c"].title == "Easy Run 3"

    def test_manual_title_matching_the_pattern_is_protected(self, make_session):
        sessions = [
            make_session(date=datetime(2024, 5, 1), id="a", title="Easy Run 9", title_source=TitleSource.MANUAL),
            make_session(date=datetime(2024, 5, 2), id="b"),
        ]
        result = _by_id(reconcile_records(sessions, today=TODAY))

        assert result["a"].title == "Easy Run 9"
        assert result["b"].title == "Easy Run 2"

    def test_counters_are_per_label(self, make_session):
        sessions = [
            make_session(SessionKind.TEMPO, datetime(2024, 5, 1), id="road", surface=Surface.ROAD),
            make_session(SessionKind.TEMPO, datetime(2024, 5, 2), id="track", surface=Surface.TRACK),
            make_session(SessionKind.EASY, datetime(2024, 5, 3), id="easy"),
        ]
        result = _by_id(reconcile_records(sessions, today=TODAY))

        assert result["road"].title == "Road Tempo 1"
        assert result["track"].title == "Tempo 1"
        assert result["easy"].title == "Easy Run 1"

    def test_season_and_year_buckets(self, make_session, season_2024):
        sessions = [
            make_session(date=datetime(2024, 2, 1), id="winter"),
            make_session(date=datetime(2024, 3, 1), id="spring"),
            make_session(date=datetime(2024, 5, 1), id="season"),
            make_session(date=datetime(2023, 12, 1), id="last-year"),
        ]
        result = _by_id(reconcile_records(sessions, seasons=[season_2024], today=TODAY))

        assert result["last-year"].title == "Easy Run 1"
        assert result["winter"].title == "Easy Run 1"
        assert result["spring"].title == "Easy Run 2"
        assert result["season"].title == "Easy Run 1"

    def test_latest_starting_season_wins(self, make_session):
        seasons = [
            Season(id="base", start_date=datetime(2024, 1, 1)),
            Season(id="build", start_date=datetime(2024, 5, 1), is_active=True),
        ]
        sessions = [
            make_session(date=datetime(2024, 4, 1), id="base-1"),
            make_session(date=datetime(2024, 5, 2), id="build-1"),
        ]
        result = _by_id(reconcile_records(sessions, seasons=seasons, today=TODAY))
        assert result["base-1"].title == "Easy Run 1"
        assert result["build-1"].title == "Easy Run 1"

    def test_race_titles_are_not_numbered(self, make_session):
        sessions = [
            make_session(SessionKind.RACE, datetime(2024, 5, 1), 5.0, 18.0, id="named", competition="Park 5K"),
            make_session(SessionKind.RACE, datetime(2024, 5, 8), 10.0, 38.0, id="manual", title="Club champs"),
            make_session(SessionKind.RACE, datetime(2024, 5, 15), 3.0, 10.0, id="event", event_name="Track night"),
        ]
        result = _by_id(reconcile_records(sessions, today=TODAY))

        assert result["named"].title == "Park 5K"
        assert result["manual"].title == "Club champs"
        assert result["event"].title == "Track night"

    def test_undated_sessions_do_not_fail(self, make_session):
        undated = make_session(id="undated").model_copy(update={"date": None})
        result = reconcile_records([undated, make_session(id="dated")], today=TODAY)
        assert {s.id for s in result} == {"undated", "dated"}

    def test_none_is_a_contract_violation(self):
        with pytest.raises(ValidationError):
            reconcile_records(None)


class TestReconcileRecords:
    """Tests for PB and SB flags."""

    def test_faster_later_session_takes_pb(self, make_session):
        first = make_session(SessionKind.EASY, datetime(2024, 5, 1), 5.0, 20.0, id="first")
        second = make_session(SessionKind.TEMPO, datetime(2024, 5, 8), 5.0, 19.5, id="second")

        result = _by_id(reconcile_records([first, second], today=TODAY))
        assert result["second"].is_personal_best
        assert not result["first"].is_personal_best

        healed = _by_id(reconcile_records([first], today=TODAY))
        assert healed["first"].is_personal_best

    def test_deleting_the_only_holder_clears_the_flag(self, make_session):
        holder = make_session(SessionKind.TEMPO, datetime(2024, 5, 8), 5.0, 19.5, id="holder")
        other = make_session(SessionKind.EASY, datetime(2024, 5, 9), 8.0, 45.0, id="other")

        result = reconcile_records([other], today=TODAY)
        assert not any(s.is_personal_best for s in result)
        assert _by_id(reconcile_records([holder, other], today=TODAY))["holder"].is_personal_best

    def test_idempotent(self, make_session, history, profile_pbs, season_2024):
        once = reconcile_records(history, profile_pbs=profile_pbs, seasons=[season_2024], today=TODAY)
        twice = reconcile_records(once, profile_pbs=profile_pbs, seasons=[season_2024], today=TODAY)

        assert [s.model_dump() for s in twice] == [s.model_dump() for s in once]

    def test_same_day_sessions_are_stable(self, make_session):
        day = datetime(2024, 5, 1)
        sessions = [
            make_session(SessionKind.EASY, day, 5.0, 20.0, id="pm"),
            make_session(SessionKind.EASY, day, 5.0, 20.0, id="am"),
        ]
        once = reconcile_records(sessions, today=TODAY)
        twice = reconcile_records(once, today=TODAY)

        assert [(s.id, s.title, s.is_personal_best) for s in once] == [
            ("pm", "Easy Run 2", False),
            ("am", "Easy Run 1", True),
        ]
        assert [s.model_dump() for s in twice] == [s.model_dump() for s in once]

    def test_stale_flags_are_cleared(self, make_session):
        stale = make_session(SessionKind.EASY, datetime(2023, 5, 1), 7.3, 40.0, is_personal_best=True, is_season_best=True)
        result = reconcile_records([stale], today=TODAY)
        assert not result[0].is_personal_best
        assert not result[0].is_season_best

    def test_profile_pb_outranks_slower_log(self, make_session, profile_pbs):
        slower = make_session(SessionKind.TEMPO, datetime(2024, 5, 1), 5.0, 18.5, id="slower")
        result = reconcile_records([slower], profile_pbs=profile_pbs, today=TODAY)
        assert not result[0].is_personal_best
        # Still the fastest 5000m of the season
        assert result[0].is_season_best

    def test_log_faster_than_profile(self, make_session, profile_pbs):
        faster = make_session(SessionKind.RACE, datetime(2024, 5, 1), 5.0, 17.5, id="faster")
        result = reconcile_records([faster], profile_pbs=profile_pbs, today=TODAY)
        assert result[0].is_personal_best
        assert not result[0].is_season_best

    def test_equal_to_profile_time_is_flagged(self, make_session, profile_pbs):
        equal = make_session(SessionKind.RACE, datetime(2024, 5, 1), 5.0, 18.0)
        assert reconcile_records([equal], profile_pbs=profile_pbs, today=TODAY)[0].is_personal_best

    def test_unparseable_profile_time_is_ignored(self, make_session):
        pbs = [PersonalBest(distance="5000m", time="soon")]
        session = make_session(SessionKind.RACE, datetime(2024, 5, 1), 5.0, 21.0)
        assert reconcile_records([session], profile_pbs=pbs, today=TODAY)[0].is_personal_best

    def test_ties_go_to_the_earliest_session(self, make_session):
        early = make_session(SessionKind.RACE, datetime(2024, 5, 1), 5.0, 19.0, id="early")
        late = make_session(SessionKind.RACE, datetime(2024, 5, 20), 5.0, 19.0, id="late")

        result = _by_id(reconcile_records([late, early], today=TODAY))

        assert result["early"].is_personal_best
        assert not result["late"].is_personal_best

    def test_non_eligible_distance_gets_no_pb(self, make_session):
        session = make_session(
            SessionKind.INTERVAL, datetime(2024, 5, 1),
            intervals=[{"reps": 8, "distance": 400, "duration": "72"}],
        )
        result = reconcile_records([session], today=TODAY)
        assert not result[0].is_personal_best
        assert result[0].is_season_best

    def test_season_best_window(self, make_session, season_2024):
        before = make_session(SessionKind.RACE, datetime(2024, 3, 1), 5.0, 18.0, id="before")
        in_season = make_session(SessionKind.RACE, datetime(2024, 5, 1), 5.0, 18.5, id="in-season")

        result = _by_id(reconcile_records([before, in_season], seasons=[season_2024], today=TODAY))

        assert result["before"].is_personal_best
        assert not result["before"].is_season_best
        assert result["in-season"].is_season_best

    def test_explicit_season_start_overrides_seasons(self, make_session, season_2024):
        session = make_session(SessionKind.RACE, datetime(2024, 4, 15), 3.0, 10.0, id="race")
        other = make_session(SessionKind.RACE, datetime(2024, 4, 16), 3.0, 9.8, id="faster")

        result = _by_id(reconcile_records(
            [session, other],
            seasons=[season_2024],
            active_season_start=datetime(2024, 4, 16),
            today=TODAY,
        ))

        assert result["faster"].is_personal_best
        assert not result["race"].is_season_best

    def test_records_use_actual_long_run_time(self, make_session):
        long_run = make_session(SessionKind.LONG, datetime(2024, 5, 1), 21.0975, 100.0, id="long")
        hm = make_session(SessionKind.RACE, datetime(2024, 5, 20), 21.0975, 90.0, id="hm")

        result = _by_id(reconcile_records([long_run, hm], today=TODAY))

        assert result["hm"].is_personal_best
        assert not result["long"].is_personal_best

    def test_linear_scale(self, make_session):
        """A large history reconciles without per-pair comparisons."""
        sessions = [
            make_session(SessionKind.EASY, datetime(2020, 1, 1).replace(day=1 + i % 28, month=1 + (i // 28) % 12), 5.0, 25.0 + i % 7)
            for i in range(2000)
        ]
        result = reconcile_records(sessions, today=TODAY)
        assert sum(s.is_personal_best for s in result) == 1


class TestDetectBestEfforts:
    """Tests for the on-save path."""

    def test_first_effort_without_profile_pb(self, make_session):
        session = make_session(SessionKind.RACE, datetime(2024, 5, 1), 5.0, 19.0)
        result = detect_best_efforts(session, [], profile_pbs=[], today=TODAY)

        assert result.is_personal_best
        assert not result.is_season_best
        assert result.distance_name == "5000m"
        assert result.seconds == pytest.approx(1140)

    def test_first_season_effort_is_a_season_best(self, make_session, profile_pbs):
        session = make_session(SessionKind.RACE, datetime(2024, 5, 1), 5.0, 18.5)
        result = detect_best_efforts(session, [], profile_pbs=profile_pbs, today=TODAY)

        assert not result.is_personal_best
        assert result.is_season_best
        assert result.distance_name == "5000m"

    def test_slower_than_season_effort(self, make_session, profile_pbs):
        earlier = make_session(SessionKind.RACE, datetime(2024, 4, 1), 5.0, 18.2, id="earlier")
        session = make_session(SessionKind.RACE, datetime(2024, 5, 1), 5.0, 18.4, id="new")

        result = detect_best_efforts(session, [earlier], profile_pbs=profile_pbs, today=TODAY)

        assert result == BestEffortResult()

    def test_non_standard_distance_season_best(self, make_session, profile_pbs):
        earlier = make_session(SessionKind.TEMPO, datetime(2024, 4, 1), 12.0, 50.0, id="earlier")
        session = make_session(SessionKind.TEMPO, datetime(2024, 5, 1), 12.0, 48.0, id="new")

        result = detect_best_efforts(session, [earlier], profile_pbs=profile_pbs, today=TODAY)

        assert result.is_season_best
        assert result.distance_name == "12.00km"

    def test_history_before_season_start_is_ignored(self, make_session, profile_pbs):
        old = make_session(SessionKind.RACE, datetime(2024, 2, 1), 5.0, 18.1, id="old")
        session = make_session(SessionKind.RACE, datetime(2024, 5, 1), 5.0, 18.4, id="new")

        result = detect_best_efforts(
            session, [old], profile_pbs=profile_pbs, season_start=datetime(2024, 4, 1), today=TODAY,
        )
        assert result.is_season_best

    def test_session_without_segments(self, make_session):
        session = make_session(SessionKind.HILLS)
        assert detect_best_efforts(session, [], today=TODAY) == BestEffortResult()


class TestApplyPersonalBest:
    def test_replaces_alias_entry(self, make_session, profile_pbs):
        session = make_session(SessionKind.RACE, datetime(2024, 5, 1), 5.0, 17.5)
        result = BestEffortResult(is_personal_best=True, distance_name="5000m", seconds=1050)

        updated = apply_personal_best(profile_pbs, result, session)

        assert len(updated) == 2
        assert updated[0].distance == "5000m"
        assert updated[0].time == "17:30.00"
        assert updated[0].date == "2024-05-01T00:00:00"
        # Input list is not modified
        assert profile_pbs[0].time == "18:00"

    def test_appends_new_distance(self, make_session, profile_pbs):
        session = make_session(SessionKind.RACE, datetime(2024, 5, 1), 1.5, 4.75)
        result = BestEffortResult(is_personal_best=True, distance_name="1500m", seconds=285)

        updated = apply_personal_best(profile_pbs, result, session)

        assert [pb.distance for pb in updated] == ["5K", "10K", "1500m"]
        assert updated[-1].time == "04:45.00"

    def test_no_pb_leaves_list_unchanged(self, make_session, profile_pbs):
        updated = apply_personal_best(profile_pbs, BestEffortResult(is_season_best=True), make_session())
        assert [pb.model_dump() for pb in updated] == [pb.model_dump() for pb in profile_pbs]


class TestCalculateSeasonBests:
    def test_best_per_distance_sorted(self, make_session):
        sessions = [
            make_session(SessionKind.RACE, datetime(2024, 5, 1), 10.0, 38.0),
            make_session(SessionKind.RACE, datetime(2024, 5, 8), 5.0, 18.5),
            make_session(SessionKind.RACE, datetime(2024, 5, 15), 5.0, 18.25),
            make_session(
                SessionKind.INTERVAL, datetime(2024, 5, 20),
                intervals=[{"reps": 4, "distance": 400, "duration": "70.5"}],
            ),
        ]
        bests = calculate_season_bests(sessions)

        assert [pb.distance for pb in bests] == ["400m", "5000m", "10K"]
        assert bests[0].time == "01:10.50"
        assert bests[1].time == "18:15.00"
        assert bests[1].date.startswith("2024-05-15")

    def test_long_runs_use_actual_time(self, make_session):
        bests = calculate_season_bests([make_session(SessionKind.LONG, datetime(2024, 5, 1), 21.0975, 100.0)])
        assert bests[0].distance == "Half Marathon"
        assert bests[0].time == "100:00.00"
