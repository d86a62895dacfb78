"""
Frozen state models for the match lifecycle.

Every entity is an immutable pydantic model. Collections inside LeagueState
are tuples, so a snapshot can be shared freely and an operation produces a
new snapshot by replacing only the collections it touches.
"""

import datetime

from pydantic import BaseModel, Field

from league.logic.enums import GameRoomStatus, MatchStatus, PendingMatchStatus


class User(BaseModel, frozen=True):
    """Player registered in the league."""

    id: str
    nickname: str
    profile_image: str = ""
    rank_score: int = 1000
    win_count: int = 0
    lose_count: int = 0
    friends: tuple[str, ...] = ()  # user IDs
    created_at: datetime.datetime
    updated_at: datetime.datetime


class Match(BaseModel, frozen=True):
    """Finalized record of a completed game, used for stats and rankings."""

    id: str
    date: datetime.date
    place: str
    player1_id: str
    player2_id: str
    score1: int
    score2: int
    winner_id: str
    is_confirmed: bool = True
    confirmed_by: tuple[str, ...] = ()
    game_room_id: str | None = None
    live_match_id: str | None = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    def involves(self, user_id: str) -> bool:
        return user_id in (self.player1_id, self.player2_id)

    def opponent_of(self, user_id: str) -> str:
        return self.player2_id if self.player1_id == user_id else self.player1_id

    def loser_id(self) -> str:
        return self.player2_id if self.winner_id == self.player1_id else self.player1_id


class PendingMatch(BaseModel, frozen=True):
    """Scheduled match that has not been played yet."""

    id: str
    date: datetime.date
    time: str  # "14:30"
    place: str
    player1_id: str
    player2_id: str
    status: PendingMatchStatus = PendingMatchStatus.PENDING
    confirmed_by: tuple[str, ...] = ()
    created_at: datetime.datetime


class GameRoom(BaseModel, frozen=True):
    """Invite-code-gated pairing of a host and a guest before a live match."""

    id: str
    invite_code: str
    host_id: str
    guest_id: str | None = None
    place: str
    date: datetime.date
    status: GameRoomStatus = GameRoomStatus.WAITING_FOR_GUEST
    max_participants: int = 2
    created_at: datetime.datetime
    expires_at: datetime.datetime

    def is_expired(self, now: datetime.datetime) -> bool:
        return now > self.expires_at

    def share_message(self) -> str:
        """Invitation text handed to the clipboard or share sheet."""
        return (
            f"You're invited to a pickup basketball match at {self.place}!\n"
            f"Invite code: {self.invite_code}\n\n"
            "Enter the code in the app to join."
        )


class LiveMatch(BaseModel, frozen=True):
    """In-progress or just-finished match derived from a ready game room."""

    id: str
    game_room_id: str
    player1_id: str  # room host
    player2_id: str  # room guest
    place: str
    date: datetime.date
    status: MatchStatus = MatchStatus.IN_PROGRESS
    start_time: datetime.datetime | None = None
    end_time: datetime.datetime | None = None
    current_score1: int | None = Field(default=None, ge=0)
    current_score2: int | None = Field(default=None, ge=0)
    created_at: datetime.datetime

    def elapsed_seconds(self, now: datetime.datetime) -> float:
        """Seconds on the match clock; frozen at end_time once set."""
        if self.start_time is None:
            return 0.0
        end = self.end_time or now
        return max(0.0, (end - self.start_time).total_seconds())


class MatchResult(BaseModel, frozen=True):
    """Reported outcome of a live match, provisional until both players confirm."""

    id: str
    live_match_id: str
    game_room_id: str
    player1_id: str
    player2_id: str
    player1_score: int
    player2_score: int
    winner_id: str
    reported_by: str | None = None
    confirmed_by: tuple[str, ...] = ()
    needs_confirmation: bool = False
    is_disputed: bool = False
    match_id: str  # finalized Match derived from this result
    created_at: datetime.datetime
    finalized_at: datetime.datetime | None = None

    @property
    def is_finalized(self) -> bool:
        return self.finalized_at is not None


class LeagueState(BaseModel, frozen=True):
    """Complete snapshot of the engine's authoritative store."""

    current_user_id: str | None = None
    users: tuple[User, ...] = ()
    matches: tuple[Match, ...] = ()
    pending_matches: tuple[PendingMatch, ...] = ()
    game_rooms: tuple[GameRoom, ...] = ()
    live_matches: tuple[LiveMatch, ...] = ()
    match_results: tuple[MatchResult, ...] = ()
