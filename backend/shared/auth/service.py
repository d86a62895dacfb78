"""Auth service: mocked provider logins backed by a local storage slot."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from shared.auth.models import AuthProvider, AuthUser

if TYPE_CHECKING:
    from shared.storage import KeyValueStorage

logger = structlog.get_logger()

DEFAULT_STORAGE_KEY = "courtside_auth_user"
GUEST_NICKNAME = "Guest"
UPDATABLE_USER_FIELDS = frozenset({"nickname", "profile_image", "email"})


class AuthError(Exception):
    """Authentication failure or invalid profile update."""


def _mock_kakao_profile() -> AuthUser:
    """Stand-in for the Kakao SDK profile lookup."""
    return AuthUser(
        id=f"kakao_{time.time_ns() // 1_000_000}",
        nickname="KakaoUser",
        email="user@kakao.com",
        profile_image="",
        provider=AuthProvider.KAKAO,
        kakao_id="12345678",
        is_guest=False,
    )


class AuthService:
    """Track the signed-in user and keep it in a single storage slot.

    The stored record is read once by load_stored_user() at startup and
    written on every login, logout and profile update.
    """

    def __init__(self, storage: KeyValueStorage, storage_key: str = DEFAULT_STORAGE_KEY) -> None:
        self._storage = storage
        self._storage_key = storage_key
        self._user: AuthUser | None = None

    @property
    def current_user(self) -> AuthUser | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def load_stored_user(self) -> AuthUser | None:
        """Restore the signed-in user from storage, if any.

        A record that no longer parses is discarded so startup falls back to
        the signed-out state.
        """
        raw = self._storage.get_item(self._storage_key)
        if raw is None:
            self._user = None
            return None
        try:
            self._user = AuthUser.model_validate_json(raw)
        except ValidationError:
            logger.warning("discarding unreadable stored user", key=self._storage_key)
            self._storage.remove_item(self._storage_key)
            self._user = None
        return self._user

    def _sign_in(self, user: AuthUser) -> AuthUser:
        self._storage.set_item(self._storage_key, user.model_dump_json())
        self._user = user
        logger.info("user signed in", user_id=user.id, provider=user.provider)
        return user

    def login_with_kakao(self) -> AuthUser:
        return self._sign_in(_mock_kakao_profile())

    def login_as_guest(self) -> AuthUser:
        guest = AuthUser(
            id=f"guest_{time.time_ns() // 1_000_000}",
            nickname=GUEST_NICKNAME,
            provider=AuthProvider.GUEST,
            is_guest=True,
        )
        return self._sign_in(guest)

    def logout(self) -> None:
        if self._user is not None:
            logger.info("user signed out", user_id=self._user.id, provider=self._user.provider)
        self._storage.remove_item(self._storage_key)
        self._user = None

    def update_user(self, **updates: str | None) -> AuthUser:
        """Update profile fields of the signed-in user and persist them."""
        if self._user is None:
            raise AuthError("No user is signed in")
        invalid_fields = set(updates) - UPDATABLE_USER_FIELDS
        if invalid_fields:
            raise AuthError(f"Cannot update fields: {sorted(invalid_fields)}")
        if "nickname" in updates and not (updates["nickname"] or "").strip():
            raise AuthError("Nickname must not be empty")
        updated = self._user.model_copy(update=updates)
        self._storage.set_item(self._storage_key, updated.model_dump_json())
        self._user = updated
        return updated
