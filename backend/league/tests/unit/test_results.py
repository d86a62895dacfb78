"""Tests for result reporting and two-party confirmation."""

import pytest

from league.logic import live, results, rooms
from league.logic.enums import LeagueErrorCode
from league.logic.exceptions import InvalidPlayerError, InvalidScoreError, InvalidTransitionError, NotFoundError
from league.logic.state_utils import find_by_id
from league.logic.types import ResultReport


@pytest.fixture
def playing(empty_state, now, match_day):
    state, _ = rooms.create_room(
        empty_state,
        room_id="room-1",
        invite_code="ABC123",
        host_id="H",
        place="Court A",
        date=match_day,
        now=now,
    )
    state, _ = rooms.join_room(state, "ABC123", "G", now)
    state, _ = live.start_live_match(state, "room-1", match_id="live-1", now=now)
    return state


def _end(state, report, now):
    return results.end_live_match(state, "live-1", report, result_id="result-1", match_id="match-1", now=now)


class TestEndLiveMatch:
    def test_confirmed_report_finalizes_immediately(self, playing, now, match_day):
        report = ResultReport(player1_score=21, player2_score=18, winner_id="H", confirmed_by=("H",))

        state, result, match = _end(playing, report, now)

        assert state.live_matches == ()
        assert state.match_results == (result,)
        assert state.matches == (match,)
        assert result.is_finalized
        assert result.match_id == match.id
        assert match.is_confirmed is True
        assert match.winner_id == "H"
        assert (match.date, match.place) == (match_day, "Court A")
        assert (match.game_room_id, match.live_match_id) == ("room-1", "live-1")

    def test_winner_derived_when_not_reported(self, playing, now):
        _, result, match = _end(playing, ResultReport(player1_score=15, player2_score=21), now)
        assert result.winner_id == match.winner_id == "G"

    def test_reporter_counts_as_confirmation(self, playing, now):
        report = ResultReport(
            player1_score=21,
            player2_score=18,
            reported_by="H",
            confirmed_by=("H",),
            needs_confirmation=True,
        )

        _, result, match = _end(playing, report, now)

        assert result.confirmed_by == ("H",)
        assert not result.is_finalized
        assert match.is_confirmed is False

    def test_both_players_confirmed_at_report_finalizes(self, playing, now):
        report = ResultReport(
            player1_score=21,
            player2_score=18,
            reported_by="H",
            confirmed_by=("H", "G"),
            needs_confirmation=True,
        )

        _, result, match = _end(playing, report, now)

        assert result.is_finalized
        assert result.finalized_at == now
        assert result.needs_confirmation is False
        assert match.is_confirmed is True

    def test_winner_mismatch_rejected(self, playing, now):
        report = ResultReport(player1_score=21, player2_score=18, winner_id="G")
        with pytest.raises(InvalidScoreError) as exc_info:
            _end(playing, report, now)
        assert exc_info.value.code == LeagueErrorCode.WINNER_MISMATCH

    def test_tied_score_rejected(self, playing, now):
        with pytest.raises(InvalidScoreError) as exc_info:
            _end(playing, ResultReport(player1_score=20, player2_score=20), now)
        assert exc_info.value.code == LeagueErrorCode.TIED_SCORE

    def test_unknown_live_match_records_nothing(self, playing, now):
        with pytest.raises(NotFoundError):
            results.end_live_match(
                playing,
                "live-404",
                ResultReport(player1_score=21, player2_score=18),
                result_id="result-1",
                match_id="match-1",
                now=now,
            )
        assert playing.match_results == ()
        assert playing.matches == ()


@pytest.fixture
def provisional(playing, now):
    report = ResultReport(player1_score=21, player2_score=18, reported_by="H", needs_confirmation=True)
    state, _, _ = _end(playing, report, now)
    return state


class TestConfirmResult:
    def test_second_player_completes_confirmation(self, provisional, now):
        state, result, confirmed = results.confirm_result(provisional, "result-1", "G", now)

        assert result.is_finalized
        assert result.needs_confirmation is False
        assert set(result.confirmed_by) == {"H", "G"}
        assert confirmed is not None
        assert confirmed.is_confirmed is True
        assert find_by_id(state.matches, "match-1").is_confirmed is True

    def test_repeat_confirmation_does_not_finalize(self, provisional, now):
        state, result, confirmed = results.confirm_result(provisional, "result-1", "H", now)

        assert result.confirmed_by == ("H",)
        assert confirmed is None
        assert find_by_id(state.matches, "match-1").is_confirmed is False

    def test_outsider_cannot_confirm(self, provisional, now):
        with pytest.raises(InvalidPlayerError) as exc_info:
            results.confirm_result(provisional, "result-1", "X", now)
        assert exc_info.value.code == LeagueErrorCode.NOT_PARTICIPANT

    def test_finalized_result_rejected(self, provisional, now):
        state, _, _ = results.confirm_result(provisional, "result-1", "G", now)
        with pytest.raises(InvalidTransitionError) as exc_info:
            results.confirm_result(state, "result-1", "G", now)
        assert exc_info.value.code == LeagueErrorCode.RESULT_FINALIZED

    def test_unknown_result(self, provisional, now):
        with pytest.raises(NotFoundError) as exc_info:
            results.confirm_result(provisional, "result-404", "G", now)
        assert exc_info.value.code == LeagueErrorCode.RESULT_NOT_FOUND


class TestDisputeResult:
    def test_dispute_blocks_confirmation(self, provisional, now):
        state, result = results.dispute_result(provisional, "result-1", "G")

        assert result.is_disputed
        with pytest.raises(InvalidTransitionError) as exc_info:
            results.confirm_result(state, "result-1", "G", now)
        assert exc_info.value.code == LeagueErrorCode.RESULT_DISPUTED
        assert find_by_id(state.matches, "match-1").is_confirmed is False

    def test_outsider_cannot_dispute(self, provisional):
        with pytest.raises(InvalidPlayerError):
            results.dispute_result(provisional, "result-1", "X")
