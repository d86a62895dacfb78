"""
Mock roster and match history loaded at startup during development.

The seeded counters and rank scores are taken as-is; rating is not replayed
over the seeded matches.
"""

import datetime

from league.logic.state import LeagueState, Match, User

# (id, nickname, rank_score, wins, losses, friends)
_MOCK_USERS = (
    ("user-1", "KAROPlayer", 1250, 15, 8, ("user-2", "user-3")),
    ("user-2", "BasketKing", 1350, 22, 5, ("user-1", "user-3")),
    ("user-3", "SlamDunk", 1180, 18, 12, ("user-1", "user-2")),
    ("user-4", "CourtMaster", 1420, 28, 3, ()),
    ("user-5", "Hoops", 1100, 12, 15, ()),
    ("user-6", "FastBreak", 1300, 20, 8, ()),
)

# (id, date, place, player1, player2, score1, score2)
_MOCK_MATCHES = (
    ("match-1", datetime.date(2024, 1, 15), "Gangnam Court", "user-1", "user-2", 21, 18),
    ("match-2", datetime.date(2024, 1, 10), "Jamsil Gym", "user-1", "user-3", 15, 21),
    ("match-3", datetime.date(2024, 1, 12), "Olympic Park Court", "user-2", "user-4", 19, 21),
)


def build_seed_state(now: datetime.datetime) -> LeagueState:
    """Snapshot with the mock roster, matches, and user-1 signed in."""
    users = tuple(
        User(
            id=user_id,
            nickname=nickname,
            rank_score=rank_score,
            win_count=wins,
            lose_count=losses,
            friends=friends,
            created_at=now,
            updated_at=now,
        )
        for user_id, nickname, rank_score, wins, losses, friends in _MOCK_USERS
    )
    matches = tuple(
        Match(
            id=match_id,
            date=date,
            place=place,
            player1_id=player1,
            player2_id=player2,
            score1=score1,
            score2=score2,
            winner_id=player1 if score1 > score2 else player2,
            is_confirmed=True,
            confirmed_by=(player1, player2),
            created_at=now,
            updated_at=now,
        )
        for match_id, date, place, player1, player2, score1, score2 in _MOCK_MATCHES
    )
    return LeagueState(current_user_id=users[0].id, users=users, matches=matches)
