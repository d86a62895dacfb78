import pytest
from pydantic import ValidationError

from league.settings import LeagueSettings


class TestLeagueSettings:
    def test_defaults(self, monkeypatch):
        for name in ("LEAGUE_ROOM_TTL_HOURS", "LEAGUE_INVITE_CODE_LENGTH", "LEAGUE_SEED_MOCK_DATA", "LEAGUE_LOG_DIR"):
            monkeypatch.delenv(name, raising=False)
        settings = LeagueSettings()
        assert settings.room_ttl_hours == 24
        assert settings.invite_code_length == 6
        assert settings.recent_matches_limit == 5
        assert settings.rating_k_factor == 32
        assert settings.initial_rank_score == 1000
        assert settings.seed_mock_data is True
        assert settings.log_dir is None

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LEAGUE_ROOM_TTL_HOURS", "2")
        monkeypatch.setenv("LEAGUE_SEED_MOCK_DATA", "false")
        settings = LeagueSettings()
        assert settings.room_ttl_hours == 2
        assert settings.seed_mock_data is False

    def test_test_env_file_disables_seed_data(self):
        assert LeagueSettings().seed_mock_data is False

    @pytest.mark.parametrize("length", ["3", "13"])
    def test_invite_code_length_bounds(self, monkeypatch, length):
        monkeypatch.setenv("LEAGUE_INVITE_CODE_LENGTH", length)
        with pytest.raises(ValidationError, match="invite_code_length"):
            LeagueSettings()

    def test_poll_interval_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("LEAGUE_POLL_INTERVAL_SECONDS", "0")
        with pytest.raises(ValidationError, match="poll_interval_seconds"):
            LeagueSettings()
