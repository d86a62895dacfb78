"""
Match result reporting and two-party confirmation.

Ending a live match records a MatchResult and derives the finalized Match
from it in the same step, removing the live match from the active list.
When the report does not need confirmation the Match is confirmed at once.
Otherwise it stays unconfirmed until both players have confirmed the
result; either player may dispute it instead, which freezes it unconfirmed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from league.logic.enums import LeagueErrorCode
from league.logic.exceptions import InvalidPlayerError, InvalidScoreError, InvalidTransitionError, NotFoundError
from league.logic.live import get_live_match
from league.logic.state import LeagueState, Match, MatchResult
from league.logic.state_utils import append_entity, find_by_id, remove_entity, replace_entity
from league.logic.validation import determine_winner, validate_scores

if TYPE_CHECKING:
    import datetime

    from league.logic.types import ResultReport


def _required_confirmations(result: MatchResult) -> set[str]:
    return {result.player1_id, result.player2_id}


def end_live_match(  # noqa: PLR0913
    state: LeagueState,
    live_match_id: str,
    report: ResultReport,
    *,
    result_id: str,
    match_id: str,
    now: datetime.datetime,
) -> tuple[LeagueState, MatchResult, Match]:
    """Record the result of a live match and derive its Match record.

    Raises:
        NotFoundError: If the live match does not exist (nothing is recorded)
        InvalidScoreError: If scores are invalid or disagree with report.winner_id

    """
    live = get_live_match(state, live_match_id)
    validate_scores(report.player1_score, report.player2_score)
    winner_id = determine_winner(live.player1_id, live.player2_id, report.player1_score, report.player2_score)
    if report.winner_id is not None and report.winner_id != winner_id:
        raise InvalidScoreError(
            f"Reported winner {report.winner_id} does not match scores "
            f"{report.player1_score}-{report.player2_score}",
            code=LeagueErrorCode.WINNER_MISMATCH,
        )

    # the reporter implicitly accepts their own report
    reporters = [*report.confirmed_by]
    if report.reported_by:
        reporters.append(report.reported_by)
    confirmed_by = tuple(dict.fromkeys(reporters))
    is_confirmed = not report.needs_confirmation or {live.player1_id, live.player2_id}.issubset(confirmed_by)

    result = MatchResult(
        id=result_id,
        live_match_id=live.id,
        game_room_id=live.game_room_id,
        player1_id=live.player1_id,
        player2_id=live.player2_id,
        player1_score=report.player1_score,
        player2_score=report.player2_score,
        winner_id=winner_id,
        reported_by=report.reported_by,
        confirmed_by=confirmed_by,
        needs_confirmation=not is_confirmed,
        match_id=match_id,
        created_at=now,
        finalized_at=now if is_confirmed else None,
    )
    match = Match(
        id=match_id,
        date=live.date,
        place=live.place,
        player1_id=live.player1_id,
        player2_id=live.player2_id,
        score1=report.player1_score,
        score2=report.player2_score,
        winner_id=winner_id,
        is_confirmed=is_confirmed,
        confirmed_by=confirmed_by,
        game_room_id=live.game_room_id,
        live_match_id=live.id,
        created_at=now,
        updated_at=now,
    )

    state = append_entity(state, "match_results", result)
    state = remove_entity(state, "live_matches", live.id)
    state = append_entity(state, "matches", match)
    return state, result, match


def get_result(state: LeagueState, result_id: str) -> MatchResult:
    result = find_by_id(state.match_results, result_id)
    if result is None:
        raise NotFoundError(f"Match result {result_id} not found", code=LeagueErrorCode.RESULT_NOT_FOUND)
    return result


def _check_open_for(result: MatchResult, user_id: str) -> None:
    if user_id not in _required_confirmations(result):
        raise InvalidPlayerError(
            f"User {user_id} did not play in result {result.id}",
            code=LeagueErrorCode.NOT_PARTICIPANT,
        )
    if result.is_finalized:
        raise InvalidTransitionError(f"Result {result.id} is already final", code=LeagueErrorCode.RESULT_FINALIZED)


def confirm_result(
    state: LeagueState,
    result_id: str,
    user_id: str,
    now: datetime.datetime,
) -> tuple[LeagueState, MatchResult, Match | None]:
    """Add user_id to the result's confirmations.

    Returns the updated result and, when this confirmation completed the
    set, the Match that just became confirmed (None otherwise).
    """
    result = get_result(state, result_id)
    _check_open_for(result, user_id)
    if result.is_disputed:
        raise InvalidTransitionError(f"Result {result_id} is disputed", code=LeagueErrorCode.RESULT_DISPUTED)

    confirmed_by = tuple(dict.fromkeys((*result.confirmed_by, user_id)))
    complete = _required_confirmations(result).issubset(confirmed_by)
    result = result.model_copy(
        update={
            "confirmed_by": confirmed_by,
            "needs_confirmation": not complete,
            "finalized_at": now if complete else None,
        },
    )
    state = replace_entity(state, "match_results", result)

    match = find_by_id(state.matches, result.match_id)
    if match is None:
        return state, result, None
    match = match.model_copy(update={"confirmed_by": confirmed_by, "is_confirmed": complete, "updated_at": now})
    state = replace_entity(state, "matches", match)
    return state, result, match if complete else None


def dispute_result(state: LeagueState, result_id: str, user_id: str) -> tuple[LeagueState, MatchResult]:
    """Flag a provisional result as disputed. Its Match stays unconfirmed."""
    result = get_result(state, result_id)
    _check_open_for(result, user_id)
    result = result.model_copy(update={"is_disputed": True})
    return replace_entity(state, "match_results", result), result
