"""Tests for bearer-token principals and authorization policies."""

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from metalflow.core.auth import (
    Principal,
    can_assign_roles,
    can_delete_users,
    can_remove_claims,
    can_remove_roles,
    get_current_principal,
    require_policy,
)
from metalflow.core.exceptions import PermissionDeniedError, UnauthorizedError
from metalflow.core.security import create_access_token


def _principal(*roles: str, claims=()) -> Principal:
    return Principal(user_id=1, username="caller", roles=frozenset(roles), claims=tuple(claims))


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetCurrentPrincipal:
    @pytest.mark.asyncio
    async def test_missing_header(self):
        with pytest.raises(UnauthorizedError):
            await get_current_principal(None)

    @pytest.mark.asyncio
    async def test_invalid_token(self):
        with pytest.raises(UnauthorizedError):
            await get_current_principal(_bearer("garbage"))

    @pytest.mark.asyncio
    async def test_valid_token(self):
        token, _ = create_access_token(
            4, "planner", ["Admin"], [("Department", "Planning"), ("Site", "North"), ("Site", "South")]
        )

        principal = await get_current_principal(_bearer(token))

        assert principal.user_id == 4
        assert principal.username == "planner"
        assert principal.is_in_role("Admin")
        assert principal.has_claim("Department", "Planning")
        assert principal.has_claim("Site", "South")


class TestPolicies:
    @pytest.mark.parametrize(
        "principal, allowed",
        [
            (_principal("Owner"), True),
            (_principal("Developer"), True),
            (_principal("Admin", claims=[("Department", "Planning")]), True),
            (_principal("Admin"), False),
            (_principal("Admin", claims=[("Department", "Sales")]), False),
            (_principal("User", claims=[("Department", "Planning")]), False),
        ],
    )
    def test_can_assign_roles(self, principal, allowed):
        assert can_assign_roles(principal) is allowed

    @pytest.mark.parametrize("role", ["Developer", "Owner", "Admin"])
    def test_delete_users_and_remove_claims(self, role):
        assert can_delete_users(_principal(role))
        assert can_remove_claims(_principal(role))

    def test_plain_user_denied_everything(self):
        user = _principal("User")
        assert not can_delete_users(user)
        assert not can_remove_claims(user)
        assert not can_remove_roles(user)

    def test_admin_cannot_remove_roles(self):
        assert not can_remove_roles(_principal("Admin"))
        assert can_remove_roles(_principal("Owner"))

    @pytest.mark.asyncio
    async def test_require_policy_denies(self):
        dependency = require_policy("CanRemoveRoles", can_remove_roles)

        with pytest.raises(PermissionDeniedError) as exc_info:
            await dependency(_principal("Admin"))

        assert exc_info.value.error_code == "PolicyDenied"

    @pytest.mark.asyncio
    async def test_require_policy_admits(self):
        dependency = require_policy("CanRemoveRoles", can_remove_roles)
        caller = _principal("Developer")

        assert await dependency(caller) is caller
