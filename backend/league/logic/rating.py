"""
Rank score updates for confirmed matches.

Uses a standard Elo update: the winner gains K * (1 - expected), where
expected is the winner's pre-match win probability, and the loser loses
the same amount. Win/lose counters move with it. Applied exactly once,
at the moment a Match becomes confirmed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from league.logic.state_utils import find_by_id, replace_entity

if TYPE_CHECKING:
    import datetime

    from league.logic.state import LeagueState, Match

DEFAULT_K_FACTOR = 32
ELO_SCALE = 400


def expected_score(rating: int, opponent_rating: int) -> float:
    """Probability that a player rated `rating` beats `opponent_rating`."""
    return 1 / (1 + 10 ** ((opponent_rating - rating) / ELO_SCALE))


def rating_delta(winner_rating: int, loser_rating: int, k_factor: int = DEFAULT_K_FACTOR) -> int:
    return round(k_factor * (1 - expected_score(winner_rating, loser_rating)))


def apply_match_outcome(
    state: LeagueState,
    match: Match,
    now: datetime.datetime,
    k_factor: int = DEFAULT_K_FACTOR,
) -> LeagueState:
    """Move rank scores and win/lose counts of both players.

    Players without a User record (e.g. guest logins) are skipped; the
    other player is still updated, rated as if facing an equal opponent.
    """
    winner = find_by_id(state.users, match.winner_id)
    loser = find_by_id(state.users, match.loser_id())
    winner_rating = winner.rank_score if winner else (loser.rank_score if loser else 0)
    loser_rating = loser.rank_score if loser else winner_rating
    delta = rating_delta(winner_rating, loser_rating, k_factor)

    if winner is not None:
        state = replace_entity(
            state,
            "users",
            winner.model_copy(
                update={
                    "rank_score": winner.rank_score + delta,
                    "win_count": winner.win_count + 1,
                    "updated_at": now,
                },
            ),
        )
    if loser is not None:
        state = replace_entity(
            state,
            "users",
            loser.model_copy(
                update={
                    "rank_score": loser.rank_score - delta,
                    "lose_count": loser.lose_count + 1,
                    "updated_at": now,
                },
            ),
        )
    return state
