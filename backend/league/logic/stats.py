"""
Derived read views over a LeagueState snapshot.

All functions are pure and recompute from the confirmed matches on every call;
LeagueStore memoizes per-user stats by snapshot version.
"""

import itertools

from league.logic.enums import StreakType
from league.logic.state import LeagueState, Match, User
from league.logic.state_utils import find_by_id
from league.logic.types import MonthlyStats, OpponentStats, RankedUser, StreakInfo, UserStats

RECENT_MATCHES_LIMIT = 5


def win_rate(wins: int, total: int) -> float:
    """Percentage of matches won, 0 when no matches were played."""
    return wins / total * 100 if total > 0 else 0.0


def user_matches(state: LeagueState, user_id: str) -> list[Match]:
    """Confirmed matches the user played in, in insertion order.

    Provisional and disputed results stay out of every view until both
    players have confirmed them, matching the rank score and counters.
    """
    return [match for match in state.matches if match.is_confirmed and match.involves(user_id)]


def _recency(match: Match) -> tuple:
    return match.date, match.created_at


def compute_streak(matches: list[Match], user_id: str) -> StreakInfo:
    """Compute the current and longest same-outcome runs.

    Matches are ordered most recent first by date, then creation time, then
    insertion order. The first match seeds the run; each following match
    either extends it or flushes it into the longest and starts a new run of
    1. The current streak is the leading run, i.e. the one the user is
    presently on.
    """
    ranked = sorted(enumerate(matches), key=lambda pair: (*_recency(pair[1]), pair[0]), reverse=True)
    ordered = [match for _, match in ranked]
    if not ordered:
        return StreakInfo()

    outcomes = [StreakType.WIN if match.winner_id == user_id else StreakType.LOSE for match in ordered]
    current_type = outcomes[0]
    current: int | None = None
    longest = 0
    run = 1
    for previous, outcome in itertools.pairwise(outcomes):
        if outcome == previous:
            run += 1
            continue
        if current is None:
            current = run
        longest = max(longest, run)
        run = 1
    if current is None:
        current = run
    longest = max(longest, run)
    return StreakInfo(current=current, longest=longest, type=current_type)


def get_user_stats(
    state: LeagueState,
    user_id: str,
    recent_limit: int = RECENT_MATCHES_LIMIT,
) -> UserStats:
    matches = user_matches(state, user_id)
    wins = sum(1 for match in matches if match.winner_id == user_id)
    user = find_by_id(state.users, user_id)
    streak = compute_streak(matches, user_id)
    return UserStats(
        user_id=user_id,
        total_matches=len(matches),
        wins=wins,
        losses=len(matches) - wins,
        win_rate=win_rate(wins, len(matches)),
        rank_score=user.rank_score if user else 0,
        recent_matches=tuple(matches[-recent_limit:]),
        current_streak=streak.current,
        current_streak_type=streak.type,
        longest_streak=streak.longest,
    )


def get_rankings(state: LeagueState) -> list[User]:
    """Users by rank score, highest first; ties keep roster order."""
    return sorted(state.users, key=lambda user: user.rank_score, reverse=True)


def get_leaderboard(state: LeagueState) -> list[RankedUser]:
    return [RankedUser(rank=i, user=user) for i, user in enumerate(get_rankings(state), start=1)]


def get_user_rank(state: LeagueState, user_id: str) -> int:
    """1-based leaderboard position, 0 for users not on the roster."""
    for rank, user in enumerate(get_rankings(state), start=1):
        if user.id == user_id:
            return rank
    return 0


def get_monthly_stats(state: LeagueState, user_id: str) -> list[MonthlyStats]:
    """Per calendar month breakdown, most recent month first."""
    months: dict[str, dict[str, int]] = {}
    for match in user_matches(state, user_id):
        key = f"{match.date.year}-{match.date.month:02d}"
        bucket = months.setdefault(key, {"wins": 0, "losses": 0})
        if match.winner_id == user_id:
            bucket["wins"] += 1
        else:
            bucket["losses"] += 1

    return [
        MonthlyStats(
            month=key,
            total_matches=counts["wins"] + counts["losses"],
            wins=counts["wins"],
            losses=counts["losses"],
            win_rate=win_rate(counts["wins"], counts["wins"] + counts["losses"]),
        )
        for key, counts in sorted(months.items(), reverse=True)
    ]


def get_opponent_stats(state: LeagueState, user_id: str) -> list[OpponentStats]:
    """Head-to-head record against every rostered opponent, most played first."""
    records: dict[str, dict] = {}
    for match in user_matches(state, user_id):
        opponent_id = match.opponent_of(user_id)
        opponent = find_by_id(state.users, opponent_id)
        if opponent is None:
            continue
        record = records.setdefault(opponent_id, {"opponent": opponent, "wins": 0, "losses": 0, "last_match": match})
        if match.winner_id == user_id:
            record["wins"] += 1
        else:
            record["losses"] += 1
        if _recency(match) >= _recency(record["last_match"]):
            record["last_match"] = match

    stats = [
        OpponentStats(
            opponent=record["opponent"],
            total_matches=record["wins"] + record["losses"],
            wins=record["wins"],
            losses=record["losses"],
            win_rate=win_rate(record["wins"], record["wins"] + record["losses"]),
            last_match=record["last_match"],
        )
        for record in records.values()
    ]
    return sorted(stats, key=lambda entry: entry.total_matches, reverse=True)


def get_streak_info(state: LeagueState, user_id: str) -> StreakInfo:
    return compute_streak(user_matches(state, user_id), user_id)
