"""League engine configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class LeagueSettings(BaseSettings):
    model_config = {"env_prefix": "LEAGUE_"}

    room_ttl_hours: int = Field(default=24, ge=1)
    invite_code_length: int = Field(default=6, ge=4, le=12)
    invite_code_max_attempts: int = Field(default=20, ge=1)
    recent_matches_limit: int = Field(default=5, ge=1)
    rating_k_factor: int = Field(default=32, ge=0)
    initial_rank_score: int = Field(default=1000, ge=0)
    poll_interval_seconds: float = Field(default=1.0, gt=0)
    room_reap_interval_seconds: float = Field(default=30.0, gt=0)
    seed_mock_data: bool = True
    log_dir: str | None = None
