"""League store: the single owner of match lifecycle state."""

from __future__ import annotations

import asyncio
import contextlib
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import structlog

from league.logic import live, pending, rating, results, roster, rooms, stats
from league.logic.enums import ACTIVE_ROOM_STATUSES, MatchStatus
from league.logic.exceptions import LeagueRuleError
from league.logic.ids import IdGenerator, generate_invite_code
from league.logic.state import LeagueState
from league.logic.state_utils import find_by_id
from league.logic.types import Rejection
from league.settings import LeagueSettings

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from datetime import date

    from league.logic.state import GameRoom, LiveMatch, Match, MatchResult, PendingMatch, User
    from league.logic.types import MonthlyStats, OpponentStats, RankedUser, ResultReport, StreakInfo, UserStats

logger = structlog.get_logger()


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class LeagueStore:
    """Owns the current LeagueState snapshot and exposes the operation set.

    Every mutating operation computes a new immutable snapshot through the
    pure functions in league.logic and swaps it in, bumping ``version``.
    A rule violation leaves the snapshot untouched and is returned as a
    Rejection instead of raised. Read operations are pure; per-user stats
    are memoized until the next mutation.

    Purely state management, no I/O. Stores are independent of each other,
    so tests and callers can hold as many as they like.
    """

    def __init__(
        self,
        state: LeagueState | None = None,
        settings: LeagueSettings | None = None,
        *,
        clock: Callable[[], datetime] = _utc_now,
        ids: IdGenerator | None = None,
        invite_codes: Callable[[int], str] = generate_invite_code,
        on_rooms_expired: Callable[[list[GameRoom]], Awaitable[None]] | None = None,
    ) -> None:
        self._state = state if state is not None else LeagueState()
        self._settings = settings or LeagueSettings()
        self._clock = clock
        self._ids = ids or IdGenerator()
        self._invite_codes = invite_codes
        self._on_rooms_expired = on_rooms_expired
        self._version = 0
        self._stats_cache: dict[str, UserStats] = {}
        self._reaper_task: asyncio.Task[None] | None = None

    @property
    def state(self) -> LeagueState:
        return self._state

    @property
    def version(self) -> int:
        """Incremented on every successful mutation."""
        return self._version

    def _commit(self, state: LeagueState) -> None:
        self._state = state
        self._version += 1
        self._stats_cache.clear()

    def _reject(self, operation: str, exc: LeagueRuleError) -> Rejection:
        logger.info("operation rejected", operation=operation, code=exc.code, reason=str(exc))
        return Rejection(code=exc.code, message=str(exc))

    def _apply_rating(self, state: LeagueState, match: Match, now: datetime) -> LeagueState:
        return rating.apply_match_outcome(state, match, now, self._settings.rating_k_factor)

    # --- roster ---

    @property
    def current_user(self) -> User | None:
        if self._state.current_user_id is None:
            return None
        return find_by_id(self._state.users, self._state.current_user_id)

    def set_current_user(self, user_id: str | None) -> User | Rejection | None:
        try:
            state = roster.set_current_user(self._state, user_id)
        except LeagueRuleError as exc:
            return self._reject("set_current_user", exc)
        self._commit(state)
        return self.current_user

    def register_user(self, nickname: str) -> User | Rejection:
        try:
            state, user = roster.register_user(
                self._state,
                user_id=self._ids.next_id("user"),
                nickname=nickname,
                rank_score=self._settings.initial_rank_score,
                now=self._clock(),
            )
        except LeagueRuleError as exc:
            return self._reject("register_user", exc)
        self._commit(state)
        logger.info("user registered", user_id=user.id)
        return user

    def add_friend(self, user_id: str, friend_id: str) -> User | Rejection:
        try:
            state, user = roster.add_friend(self._state, user_id, friend_id, self._clock())
        except LeagueRuleError as exc:
            return self._reject("add_friend", exc)
        self._commit(state)
        return user

    # --- scheduled and directly registered matches ---

    def add_pending_match(  # noqa: PLR0913
        self,
        date: date,
        time: str,
        place: str,
        player1_id: str,
        player2_id: str,
    ) -> PendingMatch | Rejection:
        try:
            state, entry = pending.add_pending_match(
                self._state,
                pending_id=self._ids.next_id("pending"),
                date=date,
                time=time,
                place=place,
                player1_id=player1_id,
                player2_id=player2_id,
                now=self._clock(),
            )
        except LeagueRuleError as exc:
            return self._reject("add_pending_match", exc)
        self._commit(state)
        logger.info("pending match added", pending_id=entry.id)
        return entry

    def convert_pending_to_match(self, pending_match_id: str, score1: int, score2: int) -> Match | Rejection:
        now = self._clock()
        try:
            state, match = pending.convert_pending_to_match(
                self._state,
                pending_match_id,
                score1,
                score2,
                match_id=self._ids.next_id("match"),
                now=now,
            )
        except LeagueRuleError as exc:
            return self._reject("convert_pending_to_match", exc)
        self._commit(self._apply_rating(state, match, now))
        logger.info("pending match converted", pending_id=pending_match_id, match_id=match.id, winner_id=match.winner_id)
        return match

    def cancel_pending_match(self, pending_match_id: str, user_id: str) -> PendingMatch | Rejection:
        try:
            state, entry = pending.cancel_pending_match(self._state, pending_match_id, user_id)
        except LeagueRuleError as exc:
            return self._reject("cancel_pending_match", exc)
        self._commit(state)
        logger.info("pending match cancelled", pending_id=entry.id, user_id=user_id)
        return entry

    def add_match(  # noqa: PLR0913
        self,
        date: date,
        place: str,
        player1_id: str,
        player2_id: str,
        score1: int,
        score2: int,
    ) -> Match | Rejection:
        """Register an already played match directly."""
        now = self._clock()
        try:
            match = pending.build_match(
                match_id=self._ids.next_id("match"),
                date=date,
                place=place,
                player1_id=player1_id,
                player2_id=player2_id,
                score1=score1,
                score2=score2,
                now=now,
            )
        except LeagueRuleError as exc:
            return self._reject("add_match", exc)
        state, match = pending.add_match(self._state, match)
        self._commit(self._apply_rating(state, match, now))
        logger.info("match added", match_id=match.id, winner_id=match.winner_id)
        return match

    # --- game rooms ---

    def expire_rooms(self) -> int:
        """Mark rooms past their expiry as expired. Returns how many changed."""
        return len(self._expire_and_collect())

    def _expire_and_collect(self) -> list[GameRoom]:
        state, expired = rooms.expire_rooms(self._state, self._clock())
        if expired:
            self._commit(state)
            for room in expired:
                logger.info("room expired", room_id=room.id)
        return expired

    def create_game_room(self, host_id: str, place: str, date: date) -> GameRoom | Rejection:
        self._expire_and_collect()
        now = self._clock()
        try:
            invite_code = rooms.issue_invite_code(
                self._state,
                now,
                length=self._settings.invite_code_length,
                max_attempts=self._settings.invite_code_max_attempts,
                generate=self._invite_codes,
            )
            state, room = rooms.create_room(
                self._state,
                room_id=self._ids.next_id("room"),
                invite_code=invite_code,
                host_id=host_id,
                place=place,
                date=date,
                now=now,
                ttl=timedelta(hours=self._settings.room_ttl_hours),
            )
        except LeagueRuleError as exc:
            return self._reject("create_game_room", exc)
        self._commit(state)
        logger.info("room created", room_id=room.id, host_id=room.host_id)
        return room

    def join_game_room(self, invite_code: str, guest_id: str) -> GameRoom | Rejection:
        self._expire_and_collect()
        try:
            state, room = rooms.join_room(self._state, invite_code, guest_id, self._clock())
        except LeagueRuleError as exc:
            return self._reject("join_game_room", exc)
        self._commit(state)
        logger.info("guest joined room", room_id=room.id, guest_id=guest_id)
        return room

    def leave_game_room(self, room_id: str, user_id: str) -> GameRoom | Rejection:
        try:
            state, room = rooms.leave_room(self._state, room_id, user_id)
        except LeagueRuleError as exc:
            return self._reject("leave_game_room", exc)
        if state is not self._state:
            self._commit(state)
            logger.info("user left room", room_id=room_id, user_id=user_id, status=room.status)
        return room

    # --- live matches and results ---

    def start_live_match(self, room_id: str) -> LiveMatch | Rejection:
        self._expire_and_collect()
        try:
            state, match = live.start_live_match(
                self._state,
                room_id,
                match_id=self._ids.next_id("live"),
                now=self._clock(),
            )
        except LeagueRuleError as exc:
            return self._reject("start_live_match", exc)
        self._commit(state)
        logger.info("live match started", room_id=room_id, match_id=match.id)
        return match

    def update_live_match(self, match_id: str, **fields: object) -> LiveMatch | Rejection:
        try:
            state, match = live.update_live_match(self._state, match_id, **fields)
        except LeagueRuleError as exc:
            return self._reject("update_live_match", exc)
        self._commit(state)
        return match

    def finish_live_match(self, match_id: str) -> LiveMatch | Rejection:
        try:
            state, match = live.finish_live_match(self._state, match_id, self._clock())
        except LeagueRuleError as exc:
            return self._reject("finish_live_match", exc)
        self._commit(state)
        logger.info("live match finished", match_id=match_id)
        return match

    def end_live_match(self, match_id: str, report: ResultReport) -> MatchResult | Rejection:
        """Record a result, retire the live match and derive its Match record."""
        now = self._clock()
        try:
            state, result, match = results.end_live_match(
                self._state,
                match_id,
                report,
                result_id=self._ids.next_id("result"),
                match_id=self._ids.next_id("match"),
                now=now,
            )
        except LeagueRuleError as exc:
            return self._reject("end_live_match", exc)
        if match.is_confirmed:
            state = self._apply_rating(state, match, now)
        self._commit(state)
        logger.info(
            "live match ended",
            live_match_id=match_id,
            result_id=result.id,
            match_id=match.id,
            winner_id=match.winner_id,
            needs_confirmation=result.needs_confirmation,
        )
        return result

    def confirm_match_result(self, result_id: str, user_id: str) -> MatchResult | Rejection:
        now = self._clock()
        try:
            state, result, confirmed = results.confirm_result(self._state, result_id, user_id, now)
        except LeagueRuleError as exc:
            return self._reject("confirm_match_result", exc)
        if confirmed is not None:
            state = self._apply_rating(state, confirmed, now)
        self._commit(state)
        logger.info("result confirmed", result_id=result_id, user_id=user_id, finalized=result.is_finalized)
        return result

    def dispute_match_result(self, result_id: str, user_id: str) -> MatchResult | Rejection:
        try:
            state, result = results.dispute_result(self._state, result_id, user_id)
        except LeagueRuleError as exc:
            return self._reject("dispute_match_result", exc)
        self._commit(state)
        logger.warning("result disputed", result_id=result_id, user_id=user_id)
        return result

    # --- lookups ---

    def get_user(self, user_id: str) -> User | None:
        return find_by_id(self._state.users, user_id)

    def get_room(self, room_id: str) -> GameRoom | None:
        return find_by_id(self._state.game_rooms, room_id)

    def get_room_by_code(self, invite_code: str) -> GameRoom | None:
        return rooms.find_room_by_code(self._state, invite_code)

    def get_pending_match(self, pending_match_id: str) -> PendingMatch | None:
        return find_by_id(self._state.pending_matches, pending_match_id)

    def get_live_match(self, match_id: str) -> LiveMatch | None:
        return find_by_id(self._state.live_matches, match_id)

    def get_match(self, match_id: str) -> Match | None:
        return find_by_id(self._state.matches, match_id)

    def get_match_result(self, result_id: str) -> MatchResult | None:
        return find_by_id(self._state.match_results, result_id)

    def get_user_rooms(self, user_id: str) -> list[GameRoom]:
        """Rooms the user hosts or has joined that are still open or playing."""
        return [
            room
            for room in self._state.game_rooms
            if room.status in ACTIVE_ROOM_STATUSES and user_id in (room.host_id, room.guest_id)
        ]

    def get_user_active_matches(self, user_id: str) -> list[LiveMatch]:
        return [
            match
            for match in self._state.live_matches
            if match.status in (MatchStatus.IN_PROGRESS, MatchStatus.FINISHED)
            and user_id in (match.player1_id, match.player2_id)
        ]

    def get_pending_confirmations(self, user_id: str) -> list[MatchResult]:
        """Provisional results still waiting for this user's confirmation."""
        return [
            result
            for result in self._state.match_results
            if not result.is_finalized
            and not result.is_disputed
            and user_id in (result.player1_id, result.player2_id)
            and user_id not in result.confirmed_by
        ]

    # --- derived views ---

    def get_user_stats(self, user_id: str) -> UserStats:
        cached = self._stats_cache.get(user_id)
        if cached is None:
            cached = stats.get_user_stats(self._state, user_id, self._settings.recent_matches_limit)
            self._stats_cache[user_id] = cached
        return cached

    def get_rankings(self) -> list[User]:
        return stats.get_rankings(self._state)

    def get_leaderboard(self) -> list[RankedUser]:
        return stats.get_leaderboard(self._state)

    def get_user_rank(self, user_id: str) -> int:
        return stats.get_user_rank(self._state, user_id)

    def get_monthly_stats(self, user_id: str) -> list[MonthlyStats]:
        return stats.get_monthly_stats(self._state, user_id)

    def get_opponent_stats(self, user_id: str) -> list[OpponentStats]:
        return stats.get_opponent_stats(self._state, user_id)

    def get_streak_info(self, user_id: str) -> StreakInfo:
        return stats.get_streak_info(self._state, user_id)

    # --- room reaper ---

    def start_reaper(self) -> None:
        """Start the periodic room expiry task."""
        if self._reaper_task is not None and not self._reaper_task.done():
            return
        self._reaper_task = asyncio.create_task(self._reaper_loop())

    async def stop_reaper(self) -> None:
        """Cancel the reaper task."""
        if self._reaper_task is not None:
            self._reaper_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._reaper_task
            self._reaper_task = None

    async def _reaper_loop(self) -> None:  # pragma: no cover - long-running background loop
        while True:
            await asyncio.sleep(self._settings.room_reap_interval_seconds)
            await self._reap_expired_rooms()

    async def _reap_expired_rooms(self) -> None:
        expired = self._expire_and_collect()
        if expired and self._on_rooms_expired:
            try:
                await self._on_rooms_expired(expired)
            except Exception:
                logger.exception("error in on_rooms_expired callback", count=len(expired))
