"""Input checks shared by every operation that records or schedules a match."""

from league.logic.enums import LeagueErrorCode
from league.logic.exceptions import InvalidInputError, InvalidPlayerError, InvalidScoreError


def require_text(value: str, field_name: str) -> str:
    """Return value stripped, raising InvalidInputError when it is blank."""
    stripped = value.strip() if isinstance(value, str) else ""
    if not stripped:
        raise InvalidInputError(f"{field_name} must not be empty")
    return stripped


def validate_players(player1_id: str, player2_id: str) -> None:
    """Both player references must be present and distinct."""
    if not player1_id or not player2_id:
        raise InvalidPlayerError("Both players must be selected")
    if player1_id == player2_id:
        raise InvalidPlayerError("A player cannot play against themselves")


def validate_scores(score1: int, score2: int) -> None:
    """Scores must be non-negative integers and must not be tied.

    Basketball has no draws, so every recorded match needs a winner.
    """
    for score in (score1, score2):
        if isinstance(score, bool) or not isinstance(score, int):
            raise InvalidScoreError(f"Score must be an integer, got {score!r}")
        if score < 0:
            raise InvalidScoreError(f"Score must be non-negative, got {score}")
    if score1 == score2:
        raise InvalidScoreError(
            f"Scores cannot be tied ({score1}-{score2}), there must be a winner",
            code=LeagueErrorCode.TIED_SCORE,
        )


def determine_winner(player1_id: str, player2_id: str, score1: int, score2: int) -> str:
    """Winner is player1 iff score1 is strictly higher."""
    return player1_id if score1 > score2 else player2_id
