"""
Live match transitions: start from a ready room, merge progress, finish.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from league.logic.enums import LIVE_MATCH_TRANSITIONS, GameRoomStatus, LeagueErrorCode, MatchStatus
from league.logic.exceptions import InvalidTransitionError, NotFoundError
from league.logic.rooms import get_room, mark_in_progress
from league.logic.state import LeagueState, LiveMatch
from league.logic.state_utils import append_entity, find_by_id, replace_entity, update_fields

if TYPE_CHECKING:
    import datetime

UPDATABLE_LIVE_FIELDS = frozenset({"status", "current_score1", "current_score2", "end_time"})


def get_live_match(state: LeagueState, match_id: str) -> LiveMatch:
    match = find_by_id(state.live_matches, match_id)
    if match is None:
        raise NotFoundError(f"Live match {match_id} not found", code=LeagueErrorCode.LIVE_MATCH_NOT_FOUND)
    return match


def start_live_match(
    state: LeagueState,
    room_id: str,
    *,
    match_id: str,
    now: datetime.datetime,
) -> tuple[LeagueState, LiveMatch]:
    """Start a match between the room's host (player 1) and guest (player 2).

    The room must be ready with a guest seated and not past its expiry.
    The room moves to in_progress so it cannot be started twice.
    """
    room = get_room(state, room_id)
    if room.status == GameRoomStatus.EXPIRED or (room.status == GameRoomStatus.READY and room.is_expired(now)):
        raise InvalidTransitionError(f"Room {room_id} has expired", code=LeagueErrorCode.ROOM_EXPIRED)
    if room.guest_id is None:
        raise InvalidTransitionError(f"Room {room_id} has no guest yet", code=LeagueErrorCode.ROOM_NOT_READY)
    if room.status != GameRoomStatus.READY:
        raise InvalidTransitionError(f"Room {room_id} is {room.status}, not ready", code=LeagueErrorCode.ROOM_NOT_READY)

    live = LiveMatch(
        id=match_id,
        game_room_id=room.id,
        player1_id=room.host_id,
        player2_id=room.guest_id,
        place=room.place,
        date=room.date,
        status=MatchStatus.IN_PROGRESS,
        start_time=now,
        created_at=now,
    )
    state = mark_in_progress(state, room)
    return append_entity(state, "live_matches", live), live


def update_live_match(state: LeagueState, match_id: str, **fields: object) -> tuple[LeagueState, LiveMatch]:
    """Merge progress fields (status, running scores, end time) into a live match.

    Running scores must be non-negative and status may only move forward
    along LIVE_MATCH_TRANSITIONS.
    """
    live = get_live_match(state, match_id)
    updated = update_fields(live, UPDATABLE_LIVE_FIELDS, **fields)
    if updated.status != live.status and updated.status not in LIVE_MATCH_TRANSITIONS[live.status]:
        raise InvalidTransitionError(
            f"Live match {match_id} cannot move from {live.status} to {updated.status}",
            code=LeagueErrorCode.INVALID_STATUS_TRANSITION,
        )
    return replace_entity(state, "live_matches", updated), updated


def finish_live_match(
    state: LeagueState,
    match_id: str,
    now: datetime.datetime,
) -> tuple[LeagueState, LiveMatch]:
    """Stop the match clock; the match waits for its result report."""
    live = get_live_match(state, match_id)
    if live.status != MatchStatus.IN_PROGRESS:
        raise InvalidTransitionError(
            f"Live match {match_id} is {live.status}, not in progress",
            code=LeagueErrorCode.LIVE_MATCH_NOT_IN_PROGRESS,
        )
    return update_live_match(state, match_id, status=MatchStatus.FINISHED, end_time=now)
