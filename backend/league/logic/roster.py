"""User registration, friendships and the signed-in user."""

from __future__ import annotations

from typing import TYPE_CHECKING

from league.logic.enums import LeagueErrorCode
from league.logic.exceptions import InvalidPlayerError, NotFoundError
from league.logic.state import LeagueState, User
from league.logic.state_utils import append_entity, find_by_id, replace_entity
from league.logic.validation import require_text

if TYPE_CHECKING:
    import datetime


def get_user(state: LeagueState, user_id: str) -> User:
    user = find_by_id(state.users, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found", code=LeagueErrorCode.USER_NOT_FOUND)
    return user


def register_user(
    state: LeagueState,
    *,
    user_id: str,
    nickname: str,
    rank_score: int,
    now: datetime.datetime,
) -> tuple[LeagueState, User]:
    user = User(
        id=user_id,
        nickname=require_text(nickname, "nickname"),
        rank_score=rank_score,
        created_at=now,
        updated_at=now,
    )
    return append_entity(state, "users", user), user


def add_friend(
    state: LeagueState,
    user_id: str,
    friend_id: str,
    now: datetime.datetime,
) -> tuple[LeagueState, User]:
    """Record a friendship on both users. Re-adding an existing friend is a no-op."""
    if user_id == friend_id:
        raise InvalidPlayerError("Users cannot befriend themselves")
    user = get_user(state, user_id)
    friend = get_user(state, friend_id)
    if friend_id not in user.friends:
        user = user.model_copy(update={"friends": (*user.friends, friend_id), "updated_at": now})
        state = replace_entity(state, "users", user)
    if user_id not in friend.friends:
        friend = friend.model_copy(update={"friends": (*friend.friends, user_id), "updated_at": now})
        state = replace_entity(state, "users", friend)
    return state, user


def set_current_user(state: LeagueState, user_id: str | None) -> LeagueState:
    if user_id is not None:
        get_user(state, user_id)
    return state.model_copy(update={"current_user_id": user_id})
