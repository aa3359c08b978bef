"""Tests for UserStore: password policy, lockout, roles and claims."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from metalflow.core.exceptions import NotFoundError, ValidationError
from metalflow.core.security import get_password_hash, verify_password
from metalflow.models.identity import Role, User, UserClaim
from metalflow.services.user_store import SignInResult, UserStore, normalize, password_errors

PASSWORD = "Coil#2024"


def _user(**overrides) -> User:
    data = {
        "id": 1,
        "username": "planner",
        "normalized_username": "PLANNER",
        "email": "planner@example.com",
        "password_hash": get_password_hash(PASSWORD),
        "access_failed_count": 0,
        "lockout_end": None,
        "roles": [],
        "claims": [],
    }
    data.update(overrides)
    return User(**data)


def _role(name: str) -> Role:
    return Role(name=name, normalized_name=normalize(name))


class TestPasswordPolicy:
    def test_strong_password_passes(self):
        assert password_errors(PASSWORD) == {}

    def test_each_rule_reported(self):
        assert set(password_errors("abc")) == {
            "PasswordTooShort",
            "PasswordRequiresDigit",
            "PasswordRequiresUpper",
            "PasswordRequiresNonAlphanumeric",
        }

    def test_lowercase_required(self):
        assert set(password_errors("ABCDEF1!")) == {"PasswordRequiresLower"}


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_create_hashes_password(self, mock_db):
        store = UserStore(mock_db)
        with patch.object(store, "find_by_name", AsyncMock(return_value=None)):
            user = await store.create_user("Planner", "planner@example.com", PASSWORD)

        assert user.normalized_username == "PLANNER"
        assert user.password_hash != PASSWORD
        assert verify_password(PASSWORD, user.password_hash)
        mock_db.add.assert_called_once_with(user)
        mock_db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_and_weak_password_reported_together(self, mock_db):
        store = UserStore(mock_db)
        with patch.object(store, "find_by_name", AsyncMock(return_value=_user())):
            with pytest.raises(ValidationError) as exc_info:
                await store.create_user("planner", "planner@example.com", "weakpass")

        details = exc_info.value.details
        assert "DuplicateUserName" in details
        assert "PasswordRequiresDigit" in details
        mock_db.add.assert_not_called()


class TestPasswordSignIn:
    @pytest.mark.asyncio
    async def test_unknown_user_fails(self, mock_db):
        store = UserStore(mock_db)
        with patch.object(store, "find_by_name", AsyncMock(return_value=None)):
            assert await store.password_sign_in("nobody", PASSWORD) is SignInResult.FAILED

    @pytest.mark.asyncio
    async def test_success_resets_failure_count(self, mock_db):
        user = _user(access_failed_count=3)
        store = UserStore(mock_db)
        with patch.object(store, "find_by_name", AsyncMock(return_value=user)):
            result = await store.password_sign_in("planner", PASSWORD)

        assert result is SignInResult.SUCCEEDED
        assert user.access_failed_count == 0

    @pytest.mark.asyncio
    async def test_fifth_failure_locks_account(self, mock_db):
        user = _user()
        store = UserStore(mock_db)
        with patch.object(store, "find_by_name", AsyncMock(return_value=user)):
            results = [await store.password_sign_in("planner", "nope") for _ in range(5)]
            after_lock = await store.password_sign_in("planner", PASSWORD)

        assert results[:4] == [SignInResult.FAILED] * 4
        assert results[4] is SignInResult.LOCKED_OUT
        assert after_lock is SignInResult.LOCKED_OUT
        assert user.access_failed_count == 0
        assert user.lockout_end > datetime.now(timezone.utc)

    @pytest.mark.asyncio
    async def test_expired_lockout_allows_sign_in(self, mock_db):
        user = _user(lockout_end=datetime.now(timezone.utc) - timedelta(seconds=1))
        store = UserStore(mock_db)
        with patch.object(store, "find_by_name", AsyncMock(return_value=user)):
            result = await store.password_sign_in("planner", PASSWORD)

        assert result is SignInResult.SUCCEEDED
        assert user.lockout_end is None


class TestRolesAndClaims:
    @pytest.mark.asyncio
    async def test_add_to_role(self, mock_db):
        user = _user()
        admin = _role("Admin")
        store = UserStore(mock_db)
        with patch.object(store, "find_role", AsyncMock(return_value=admin)):
            await store.add_to_role(user, "admin")

        assert user.roles == [admin]
        assert await store.is_in_role(user, "ADMIN")
        assert await store.get_roles(user) == ["Admin"]

    @pytest.mark.asyncio
    async def test_add_to_role_twice(self, mock_db):
        admin = _role("Admin")
        user = _user(roles=[admin])
        store = UserStore(mock_db)
        with patch.object(store, "find_role", AsyncMock(return_value=admin)):
            with pytest.raises(ValidationError) as exc_info:
                await store.add_to_role(user, "Admin")

        assert exc_info.value.error_code == "UserAlreadyInRole"

    @pytest.mark.asyncio
    async def test_add_to_unknown_role(self, mock_db):
        store = UserStore(mock_db)
        with patch.object(store, "find_role", AsyncMock(return_value=None)):
            with pytest.raises(NotFoundError):
                await store.add_to_role(_user(), "Auditor")

    @pytest.mark.asyncio
    async def test_remove_from_role_not_held(self, mock_db):
        with pytest.raises(ValidationError) as exc_info:
            await UserStore(mock_db).remove_from_role(_user(), "Admin")

        assert exc_info.value.error_code == "UserNotInRole"

    @pytest.mark.asyncio
    async def test_remove_claim_removes_every_match(self, mock_db):
        user = _user(
            claims=[
                UserClaim(claim_type="Department", claim_value="Planning"),
                UserClaim(claim_type="Department", claim_value="Planning"),
                UserClaim(claim_type="Site", claim_value="North"),
            ]
        )
        store = UserStore(mock_db)

        await store.remove_claim(user, "Department", "Planning")

        assert await store.get_claims(user) == [("Site", "North")]

    @pytest.mark.asyncio
    async def test_remove_missing_claim(self, mock_db):
        store = UserStore(mock_db)

        with pytest.raises(NotFoundError) as exc_info:
            await store.remove_claim(_user(), "Department", "Planning")

        assert exc_info.value.error_code == "ClaimNotFound"

    @pytest.mark.asyncio
    async def test_add_claim(self, mock_db):
        user = _user()
        store = UserStore(mock_db)

        await store.add_claim(user, "Department", "Planning")

        assert await store.has_claim(user, "Department", "Planning")
