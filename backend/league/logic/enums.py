"""
String enum definitions for match lifecycle concepts.
"""

from enum import StrEnum


class GameRoomStatus(StrEnum):
    """Lifecycle of an invite-based game room."""

    WAITING_FOR_GUEST = "waiting_for_guest"
    READY = "ready"
    IN_PROGRESS = "in_progress"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


# rooms that still hold their invite code
ACTIVE_ROOM_STATUSES = frozenset(
    {GameRoomStatus.WAITING_FOR_GUEST, GameRoomStatus.READY, GameRoomStatus.IN_PROGRESS},
)

# rooms the reaper may expire
EXPIRABLE_ROOM_STATUSES = frozenset({GameRoomStatus.WAITING_FOR_GUEST, GameRoomStatus.READY})


class MatchStatus(StrEnum):
    """Lifecycle of a live match."""

    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
    COMPLETED = "completed"
    DISPUTED = "disputed"
    CANCELLED = "cancelled"


class PendingMatchStatus(StrEnum):
    """Lifecycle of a scheduled match."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class StreakType(StrEnum):
    """Outcome type of a streak."""

    WIN = "win"
    LOSE = "lose"
    NONE = "none"


class LeagueErrorCode(StrEnum):
    """Error codes returned to callers for rejected operations."""

    INVALID_SCORE = "invalid_score"
    TIED_SCORE = "tied_score"
    WINNER_MISMATCH = "winner_mismatch"
    INVALID_PLAYERS = "invalid_players"
    INVALID_INPUT = "invalid_input"
    NOT_PARTICIPANT = "not_participant"
    USER_NOT_FOUND = "user_not_found"
    PENDING_MATCH_NOT_FOUND = "pending_match_not_found"
    ROOM_NOT_FOUND = "room_not_found"
    ROOM_NOT_JOINABLE = "room_not_joinable"
    ROOM_EXPIRED = "room_expired"
    ROOM_NOT_READY = "room_not_ready"
    LIVE_MATCH_NOT_FOUND = "live_match_not_found"
    LIVE_MATCH_NOT_IN_PROGRESS = "live_match_not_in_progress"
    INVALID_STATUS_TRANSITION = "invalid_status_transition"
    RESULT_NOT_FOUND = "result_not_found"
    RESULT_FINALIZED = "result_finalized"
    RESULT_DISPUTED = "result_disputed"
    INVITE_CODE_EXHAUSTED = "invite_code_exhausted"


# statuses a live match may move to from each status; terminal statuses map to nothing
LIVE_MATCH_TRANSITIONS: dict[MatchStatus, frozenset[MatchStatus]] = {
    MatchStatus.WAITING: frozenset({MatchStatus.IN_PROGRESS, MatchStatus.CANCELLED}),
    MatchStatus.IN_PROGRESS: frozenset(
        {MatchStatus.FINISHED, MatchStatus.COMPLETED, MatchStatus.DISPUTED, MatchStatus.CANCELLED},
    ),
    MatchStatus.FINISHED: frozenset({MatchStatus.COMPLETED, MatchStatus.DISPUTED, MatchStatus.CANCELLED}),
    MatchStatus.COMPLETED: frozenset(),
    MatchStatus.DISPUTED: frozenset(),
    MatchStatus.CANCELLED: frozenset(),
}
