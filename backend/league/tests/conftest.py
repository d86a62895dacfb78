"""Shared fixtures for league tests."""

from datetime import UTC, date, datetime, timedelta

import pytest

from league.logic.seed import build_seed_state
from league.logic.state import LeagueState
from league.session.store import LeagueStore
from league.settings import LeagueSettings

NOW = datetime(2024, 1, 20, 12, 0, tzinfo=UTC)
MATCH_DAY = date(2024, 1, 21)


class FakeClock:
    """Settable clock injected into LeagueStore."""

    def __init__(self, start: datetime = NOW) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def match_day():
    return MATCH_DAY


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return LeagueSettings(seed_mock_data=False)


@pytest.fixture
def seed_state():
    return build_seed_state(NOW)


@pytest.fixture
def empty_state():
    return LeagueState()


@pytest.fixture
def store(clock, settings):
    return LeagueStore(settings=settings, clock=clock)


@pytest.fixture
def seeded_store(clock, settings, seed_state):
    return LeagueStore(seed_state, settings, clock=clock)
