"""
Pydantic models that cross the store boundary.

Contains the typed rejection result, the result report submitted when a
live match ends, and the derived stats views.
"""

from pydantic import BaseModel, Field

from league.logic.enums import LeagueErrorCode, StreakType
from league.logic.state import Match, User


class Rejection(BaseModel, frozen=True):
    """Typed failure of a store operation. The snapshot is left untouched."""

    code: LeagueErrorCode
    message: str


class ResultReport(BaseModel, frozen=True):
    """Score report submitted when a live match ends."""

    player1_score: int
    player2_score: int
    winner_id: str | None = None  # checked against the scores when given
    reported_by: str | None = None
    confirmed_by: tuple[str, ...] = ()
    needs_confirmation: bool = False


class StreakInfo(BaseModel, frozen=True):
    current: int = 0
    longest: int = 0
    type: StreakType = StreakType.NONE


class UserStats(BaseModel, frozen=True):
    """Aggregate record of a user's matches."""

    user_id: str
    total_matches: int
    wins: int
    losses: int
    win_rate: float
    rank_score: int
    recent_matches: tuple[Match, ...] = ()
    current_streak: int = 0
    current_streak_type: StreakType = StreakType.NONE
    longest_streak: int = 0

    @property
    def win_rate_label(self) -> str:
        return f"{self.win_rate:.1f}%"


class MonthlyStats(BaseModel, frozen=True):
    month: str  # "2024-01"
    total_matches: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0


class OpponentStats(BaseModel, frozen=True):
    opponent: User
    total_matches: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0
    last_match: Match | None = None


class RankedUser(BaseModel, frozen=True):
    """Leaderboard row."""

    rank: int = Field(ge=1)
    user: User
