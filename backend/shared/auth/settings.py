"""Auth settings for the locally stored sign-in record."""

from pydantic import Field
from pydantic_settings import BaseSettings


class AuthSettings(BaseSettings):
    model_config = {"env_prefix": "AUTH_"}

    # JSON file holding the key-value slots
    storage_path: str = Field(default="backend/data/local_storage.json", min_length=1)

    # slot key for the signed-in user record
    storage_key: str = Field(default="courtside_auth_user", min_length=1)
