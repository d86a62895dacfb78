"""
Scheduled matches and direct match registration.

A PendingMatch maps to at most one Match: converting it appends the Match
and removes the pending entry in the same snapshot.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from league.logic.enums import LeagueErrorCode, PendingMatchStatus
from league.logic.exceptions import InvalidPlayerError, NotFoundError
from league.logic.state import LeagueState, Match, PendingMatch
from league.logic.state_utils import append_entity, find_by_id, remove_entity
from league.logic.validation import determine_winner, require_text, validate_players, validate_scores

if TYPE_CHECKING:
    import datetime


def add_pending_match(  # noqa: PLR0913
    state: LeagueState,
    *,
    pending_id: str,
    date: datetime.date,
    time: str,
    place: str,
    player1_id: str,
    player2_id: str,
    now: datetime.datetime,
) -> tuple[LeagueState, PendingMatch]:
    validate_players(player1_id, player2_id)
    pending = PendingMatch(
        id=pending_id,
        date=date,
        time=time.strip(),
        place=require_text(place, "place"),
        player1_id=player1_id,
        player2_id=player2_id,
        status=PendingMatchStatus.PENDING,
        created_at=now,
    )
    return append_entity(state, "pending_matches", pending), pending


def get_pending_match(state: LeagueState, pending_id: str) -> PendingMatch:
    pending = find_by_id(state.pending_matches, pending_id)
    if pending is None:
        raise NotFoundError(
            f"Pending match {pending_id} not found",
            code=LeagueErrorCode.PENDING_MATCH_NOT_FOUND,
        )
    return pending


def build_match(  # noqa: PLR0913
    *,
    match_id: str,
    date: datetime.date,
    place: str,
    player1_id: str,
    player2_id: str,
    score1: int,
    score2: int,
    now: datetime.datetime,
) -> Match:
    """Validate scores and build a confirmed Match with its winner derived."""
    validate_players(player1_id, player2_id)
    validate_scores(score1, score2)
    return Match(
        id=match_id,
        date=date,
        place=require_text(place, "place"),
        player1_id=player1_id,
        player2_id=player2_id,
        score1=score1,
        score2=score2,
        winner_id=determine_winner(player1_id, player2_id, score1, score2),
        is_confirmed=True,
        confirmed_by=(player1_id, player2_id),
        created_at=now,
        updated_at=now,
    )


def convert_pending_to_match(  # noqa: PLR0913
    state: LeagueState,
    pending_id: str,
    score1: int,
    score2: int,
    *,
    match_id: str,
    now: datetime.datetime,
) -> tuple[LeagueState, Match]:
    """Record the score of a scheduled match, consuming the pending entry."""
    pending = get_pending_match(state, pending_id)
    match = build_match(
        match_id=match_id,
        date=pending.date,
        place=pending.place,
        player1_id=pending.player1_id,
        player2_id=pending.player2_id,
        score1=score1,
        score2=score2,
        now=now,
    )
    state = append_entity(state, "matches", match)
    return remove_entity(state, "pending_matches", pending.id), match


def cancel_pending_match(state: LeagueState, pending_id: str, user_id: str) -> tuple[LeagueState, PendingMatch]:
    """Drop a scheduled match. Only its players may cancel it."""
    pending = get_pending_match(state, pending_id)
    if user_id not in (pending.player1_id, pending.player2_id):
        raise InvalidPlayerError(
            f"User {user_id} is not scheduled in {pending_id}",
            code=LeagueErrorCode.NOT_PARTICIPANT,
        )
    cancelled = pending.model_copy(update={"status": PendingMatchStatus.CANCELLED})
    return remove_entity(state, "pending_matches", pending.id), cancelled


def add_match(state: LeagueState, match: Match) -> tuple[LeagueState, Match]:
    return append_entity(state, "matches", match), match
