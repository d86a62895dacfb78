"""
Game room transitions: create, join by invite code, leave, expire.

Pure functions over LeagueState. Each returns the new snapshot together
with the room it produced and raises a LeagueRuleError subclass when the
transition is not allowed, leaving the input snapshot untouched.

Room lifecycle:

    waiting_for_guest --join--> ready --start--> in_progress
          ^                       |
          +------guest leaves-----+
    host leaves (any open state) --> cancelled
    TTL elapsed (waiting/ready)  --> expired
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from league.logic.enums import (
    ACTIVE_ROOM_STATUSES,
    EXPIRABLE_ROOM_STATUSES,
    GameRoomStatus,
    LeagueErrorCode,
)
from league.logic.exceptions import (
    InvalidPlayerError,
    InvalidTransitionError,
    InviteCodeExhaustedError,
    NotFoundError,
)
from league.logic.ids import INVITE_CODE_LENGTH, generate_invite_code, normalize_invite_code
from league.logic.state import GameRoom, LeagueState
from league.logic.state_utils import append_entity, find_by_id, replace_entity
from league.logic.validation import require_text

if TYPE_CHECKING:
    import datetime
    from collections.abc import Callable

ROOM_TTL = timedelta(hours=24)


def active_invite_codes(state: LeagueState, now: datetime.datetime) -> set[str]:
    """Invite codes held by rooms that can still be joined or played."""
    return {
        room.invite_code
        for room in state.game_rooms
        if room.status in ACTIVE_ROOM_STATUSES and not room.is_expired(now)
    }


def issue_invite_code(
    state: LeagueState,
    now: datetime.datetime,
    *,
    length: int = INVITE_CODE_LENGTH,
    max_attempts: int = 20,
    generate: Callable[[int], str] = generate_invite_code,
) -> str:
    """Generate an invite code not held by any active room.

    Raises:
        InviteCodeExhaustedError: If every attempt collided with an active code

    """
    taken = active_invite_codes(state, now)
    for _ in range(max_attempts):
        code = generate(length)
        if code not in taken:
            return code
    raise InviteCodeExhaustedError(f"No free invite code after {max_attempts} attempts")


def create_room(  # noqa: PLR0913
    state: LeagueState,
    *,
    room_id: str,
    invite_code: str,
    host_id: str,
    place: str,
    date: datetime.date,
    now: datetime.datetime,
    ttl: timedelta = ROOM_TTL,
) -> tuple[LeagueState, GameRoom]:
    """Open a room waiting for a guest, expiring ttl after creation."""
    host_id = require_text(host_id, "host_id")
    place = require_text(place, "place")
    room = GameRoom(
        id=room_id,
        invite_code=invite_code,
        host_id=host_id,
        place=place,
        date=date,
        status=GameRoomStatus.WAITING_FOR_GUEST,
        created_at=now,
        expires_at=now + ttl,
    )
    return append_entity(state, "game_rooms", room), room


def find_room_by_code(state: LeagueState, invite_code: str) -> GameRoom | None:
    """Return the joinable room for a code, falling back to any room holding it."""
    code = normalize_invite_code(invite_code)
    matching = [room for room in state.game_rooms if room.invite_code == code]
    waiting = [room for room in matching if room.status == GameRoomStatus.WAITING_FOR_GUEST]
    if waiting:
        return waiting[-1]
    return matching[-1] if matching else None


def join_room(
    state: LeagueState,
    invite_code: str,
    guest_id: str,
    now: datetime.datetime,
) -> tuple[LeagueState, GameRoom]:
    """Seat guest_id in the room holding invite_code (case-insensitive).

    Only a room in waiting_for_guest accepts a guest, so a room flips to
    ready at most once per guest.
    """
    guest_id = require_text(guest_id, "guest_id")
    room = find_room_by_code(state, invite_code)
    if room is None:
        raise NotFoundError(f"No room with invite code {invite_code!r}", code=LeagueErrorCode.ROOM_NOT_FOUND)
    if room.status == GameRoomStatus.EXPIRED or (
        room.status == GameRoomStatus.WAITING_FOR_GUEST and room.is_expired(now)
    ):
        raise InvalidTransitionError(f"Room {room.id} has expired", code=LeagueErrorCode.ROOM_EXPIRED)
    if room.status != GameRoomStatus.WAITING_FOR_GUEST:
        raise InvalidTransitionError(
            f"Room {room.id} is {room.status}, not waiting for a guest",
            code=LeagueErrorCode.ROOM_NOT_JOINABLE,
        )
    if guest_id == room.host_id:
        raise InvalidPlayerError("Host cannot join their own room as guest")

    joined = room.model_copy(update={"guest_id": guest_id, "status": GameRoomStatus.READY})
    return replace_entity(state, "game_rooms", joined), joined


def get_room(state: LeagueState, room_id: str) -> GameRoom:
    room = find_by_id(state.game_rooms, room_id)
    if room is None:
        raise NotFoundError(f"Room {room_id} not found", code=LeagueErrorCode.ROOM_NOT_FOUND)
    return room


def leave_room(state: LeagueState, room_id: str, user_id: str) -> tuple[LeagueState, GameRoom]:
    """Remove user_id from the room.

    Host leaving cancels the room regardless of guest presence. Guest
    leaving reopens it for another guest. Anyone else, and any room that
    has already started or closed, is a no-op.
    """
    room = get_room(state, room_id)
    if room.status not in EXPIRABLE_ROOM_STATUSES:
        return state, room
    if user_id == room.host_id:
        updated = room.model_copy(update={"status": GameRoomStatus.CANCELLED})
    elif room.guest_id is not None and user_id == room.guest_id:
        updated = room.model_copy(update={"guest_id": None, "status": GameRoomStatus.WAITING_FOR_GUEST})
    else:
        return state, room
    return replace_entity(state, "game_rooms", updated), updated


def expire_rooms(state: LeagueState, now: datetime.datetime) -> tuple[LeagueState, list[GameRoom]]:
    """Mark every waiting or ready room past its expiry as expired."""
    expired: list[GameRoom] = []
    rooms: list[GameRoom] = []
    for room in state.game_rooms:
        if room.status in EXPIRABLE_ROOM_STATUSES and room.is_expired(now):
            room = room.model_copy(update={"status": GameRoomStatus.EXPIRED})  # noqa: PLW2901
            expired.append(room)
        rooms.append(room)
    if not expired:
        return state, expired
    return state.model_copy(update={"game_rooms": tuple(rooms)}), expired


def mark_in_progress(state: LeagueState, room: GameRoom) -> LeagueState:
    return replace_entity(state, "game_rooms", room.model_copy(update={"status": GameRoomStatus.IN_PROGRESS}))
