"""Signed-in user record kept in local storage."""

from enum import StrEnum
from typing import Self

from pydantic import BaseModel, model_validator


class AuthProvider(StrEnum):
    KAKAO = "kakao"
    GUEST = "guest"


class AuthUser(BaseModel, frozen=True):
    """User identity produced by a login and persisted across restarts."""

    id: str
    nickname: str
    provider: AuthProvider
    email: str | None = None
    profile_image: str | None = None
    kakao_id: str | None = None  # only for Kakao logins
    is_guest: bool = False

    @model_validator(mode="after")
    def _validate_provider_fields(self) -> Self:
        if self.provider == AuthProvider.GUEST and not self.is_guest:
            raise ValueError("Guest logins must be flagged is_guest")
        if self.provider == AuthProvider.KAKAO and self.is_guest:
            raise ValueError("Kakao logins cannot be guests")
        return self
