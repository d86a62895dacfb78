"""Tests for AuthService."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from shared.auth.models import AuthProvider, AuthUser
from shared.auth.service import AuthError, AuthService
from shared.storage import LocalKeyValueStorage

if TYPE_CHECKING:
    from pathlib import Path

STORAGE_KEY = "courtside_auth_user"


@pytest.fixture
def storage(tmp_path: Path):
    return LocalKeyValueStorage(tmp_path / "local_storage.json")


@pytest.fixture
def auth_service(storage):
    return AuthService(storage, STORAGE_KEY)


class TestLogin:
    def test_starts_signed_out(self, auth_service):
        assert auth_service.current_user is None
        assert auth_service.is_authenticated is False

    def test_kakao_login_produces_kakao_user(self, auth_service, storage):
        user = auth_service.login_with_kakao()

        assert user.id.startswith("kakao_")
        assert user.provider is AuthProvider.KAKAO
        assert user.is_guest is False
        assert user.kakao_id
        assert auth_service.current_user == user
        assert AuthUser.model_validate_json(storage.get_item(STORAGE_KEY)) == user

    def test_guest_login_produces_guest_user(self, auth_service, storage):
        user = auth_service.login_as_guest()

        assert user.id.startswith("guest_")
        assert user.nickname == "Guest"
        assert user.provider is AuthProvider.GUEST
        assert user.is_guest is True
        assert json.loads(storage.get_item(STORAGE_KEY))["id"] == user.id

    def test_logout_clears_user_and_slot(self, auth_service, storage):
        auth_service.login_as_guest()

        auth_service.logout()

        assert auth_service.current_user is None
        assert storage.get_item(STORAGE_KEY) is None

    def test_logout_when_signed_out_is_harmless(self, auth_service):
        auth_service.logout()

        assert auth_service.is_authenticated is False


class TestLoadStoredUser:
    def test_empty_slot_means_signed_out(self, auth_service):
        assert auth_service.load_stored_user() is None
        assert auth_service.is_authenticated is False

    def test_restores_user_saved_by_earlier_session(self, storage):
        first = AuthService(storage, STORAGE_KEY)
        user = first.login_with_kakao()

        second = AuthService(storage, STORAGE_KEY)

        assert second.load_stored_user() == user
        assert second.is_authenticated is True

    def test_unreadable_record_is_discarded(self, storage, auth_service, caplog):
        storage.set_item(STORAGE_KEY, '{"id": "x"}')

        assert auth_service.load_stored_user() is None
        assert storage.get_item(STORAGE_KEY) is None
        assert "discarding unreadable stored user" in caplog.text

    def test_other_slots_are_left_alone(self, storage, auth_service):
        storage.set_item("other", "value")
        auth_service.login_as_guest()
        auth_service.logout()

        assert storage.get_item("other") == "value"


class TestUpdateUser:
    def test_updates_and_persists_nickname(self, auth_service, storage):
        auth_service.login_as_guest()

        updated = auth_service.update_user(nickname="CourtRookie")

        assert updated.nickname == "CourtRookie"
        assert auth_service.current_user.nickname == "CourtRookie"
        assert json.loads(storage.get_item(STORAGE_KEY))["nickname"] == "CourtRookie"

    def test_requires_signed_in_user(self, auth_service):
        with pytest.raises(AuthError, match="No user is signed in"):
            auth_service.update_user(nickname="x")

    def test_rejects_identity_fields(self, auth_service):
        auth_service.login_as_guest()

        with pytest.raises(AuthError, match="Cannot update fields"):
            auth_service.update_user(id="someone-else")

    def test_rejects_blank_nickname(self, auth_service):
        auth_service.login_with_kakao()

        with pytest.raises(AuthError, match="Nickname must not be empty"):
            auth_service.update_user(nickname="   ")
