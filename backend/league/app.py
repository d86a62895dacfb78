"""Composition root: wire settings, logging, the league store and auth together."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from league.logic.seed import build_seed_state
from league.session.store import LeagueStore
from league.session.watcher import RoomWatcher
from league.settings import LeagueSettings
from shared.auth import AuthService, AuthSettings
from shared.logging import setup_logging
from shared.storage import LocalKeyValueStorage

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from league.logic.state import GameRoom

logger = structlog.get_logger()


@dataclass
class LeagueApp:
    settings: LeagueSettings
    store: LeagueStore
    auth: AuthService

    def watch_room(
        self,
        room_id: str,
        on_guest_joined: Callable[[GameRoom], Awaitable[None]],
        on_room_closed: Callable[[GameRoom], Awaitable[None]] | None = None,
    ) -> RoomWatcher:
        """Start polling a hosted room at the configured interval."""
        watcher = RoomWatcher(
            self.store,
            room_id,
            on_guest_joined,
            interval=self.settings.poll_interval_seconds,
            on_room_closed=on_room_closed,
        )
        watcher.start()
        return watcher


def create_league(
    settings: LeagueSettings | None = None,
    auth_settings: AuthSettings | None = None,
    store: LeagueStore | None = None,
) -> LeagueApp:
    if settings is None:
        settings = LeagueSettings()
    if auth_settings is None:
        auth_settings = AuthSettings()

    log_file = setup_logging(settings.log_dir)

    if store is None:
        state = build_seed_state(datetime.now(tz=UTC)) if settings.seed_mock_data else None
        store = LeagueStore(state, settings)

    auth = AuthService(LocalKeyValueStorage(auth_settings.storage_path), auth_settings.storage_key)
    user = auth.load_stored_user()

    logger.info(
        "league ready",
        users=len(store.state.users),
        matches=len(store.state.matches),
        signed_in=user is not None,
        log_file=str(log_file) if log_file else None,
    )
    return LeagueApp(settings=settings, store=store, auth=auth)
