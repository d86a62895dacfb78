"""
Polling watcher for a game room's guest.

Rooms have no push channel, so a host screen polls the store once per
interval and reacts when a guest appears. The watcher only reads the
store; all mutations still go through LeagueStore operations on the same
event loop.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from league.logic.enums import GameRoomStatus

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from league.logic.state import GameRoom
    from league.session.store import LeagueStore

logger = structlog.get_logger()

DEFAULT_POLL_INTERVAL_SECONDS = 1.0

# the watch ends once the room reaches one of these
_CLOSED_ROOM_STATUSES = frozenset({GameRoomStatus.CANCELLED, GameRoomStatus.EXPIRED, GameRoomStatus.IN_PROGRESS})


class RoomWatcher:
    """
    Watch one room and fire a callback once when a guest joins.

    The guest-joined callback fires on the transition from no guest to a
    guest, so a guest who leaves and a new guest who joins fire it again.
    Call stop() on teardown.
    """

    def __init__(
        self,
        store: LeagueStore,
        room_id: str,
        on_guest_joined: Callable[[GameRoom], Awaitable[None]],
        *,
        interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        on_room_closed: Callable[[GameRoom], Awaitable[None]] | None = None,
    ) -> None:
        self._store = store
        self._room_id = room_id
        self._on_guest_joined = on_guest_joined
        self._on_room_closed = on_room_closed
        self._interval = interval
        self._task: asyncio.Task[None] | None = None
        room = store.get_room(room_id)
        self._last_guest_id: str | None = room.guest_id if room else None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._poll_loop())

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def poll_once(self) -> bool:
        """Check the room once. Returns False when watching should end."""
        room = self._store.get_room(self._room_id)
        if room is None:
            logger.warning("watched room disappeared", room_id=self._room_id)
            return False

        guest_id = room.guest_id
        if guest_id is not None and guest_id != self._last_guest_id:
            logger.info("guest appeared in watched room", room_id=room.id, guest_id=guest_id)
            await self._on_guest_joined(room)
        self._last_guest_id = guest_id

        if room.status in _CLOSED_ROOM_STATUSES:
            if self._on_room_closed is not None:
                await self._on_room_closed(room)
            return False
        return True

    async def _poll_loop(self) -> None:
        try:
            while await self.poll_once():
                await asyncio.sleep(self._interval)
        except asyncio.CancelledError:
            pass
        except (RuntimeError, ValueError):  # fmt: skip
            logger.exception("room watcher callback failed", room_id=self._room_id)
