"""Authentication and permission management.

Rules that depend on the *target* user's roles (protected roles) are
enforced here. Rules about the *caller* are authorization policies in
``metalflow.core.auth``.
"""

import logging
from collections.abc import Sequence

from metalflow.core.auth import ROLE_DEVELOPER, ROLE_OWNER
from metalflow.core.config import settings
from metalflow.core.exceptions import (
    AppError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from metalflow.core.security import create_access_token
from metalflow.models.identity import User
from metalflow.schemas.auth import ClaimItem, LoginResponse
from metalflow.services.user_store import SignInResult, UserStore, normalize

logger = logging.getLogger(__name__)

PROTECTED_ROLES = (ROLE_DEVELOPER, ROLE_OWNER)


class AuthService:
    """Permission/authentication service on top of a ``UserStore``."""

    def __init__(self, users: UserStore) -> None:
        self.users = users

    async def register(self, username: str, email: str, password: str) -> User:
        """Create a user and grant the default role, creating it if needed."""
        user = await self.users.create_user(username, email, password)

        default_role = settings.DEFAULT_USER_ROLE
        if not await self.users.role_exists(default_role):
            await self.users.create_role(default_role)
            logger.info("Created missing default role %r", default_role)
        await self.users.add_to_role(user, default_role)

        logger.info("Registered user %s (%s)", user.id, username)
        return user

    async def authenticate(self, username: str, password: str) -> LoginResponse | None:
        """Sign in and issue a token, or return None on bad credentials/lockout."""
        result = await self.users.password_sign_in(username, password)
        if result is not SignInResult.SUCCEEDED:
            logger.warning("Login failed for %r: %s", username, result.value)
            return None

        user = await self.users.find_by_name(username)
        if user is None:
            return None

        roles = await self.users.get_roles(user)
        claims = await self.users.get_claims(user)
        token, expires_at = create_access_token(user.id, user.username, roles, claims)
        logger.info("User %s logged in", user.id)
        return LoginResponse(
            token=token, user_id=user.id, username=user.username, expires_at=expires_at
        )

    async def logout(self, username: str) -> None:
        # Tokens are stateless; there is nothing to revoke server-side.
        logger.info("User %r logged out", username)

    async def get_user(self, user_id: int) -> User:
        user = await self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User with ID {user_id} not found.", error_code="UserNotFound")
        return user

    async def get_user_roles(self, user_id: int) -> list[str]:
        return await self.users.get_roles(await self.get_user(user_id))

    async def get_user_claims(self, user_id: int) -> list[tuple[str, str]]:
        return await self.users.get_claims(await self.get_user(user_id))

    async def assign_role(self, user_id: int, role_name: str) -> None:
        user = await self.get_user(user_id)
        await self._require_role(role_name)
        await self.users.add_to_role(user, role_name)
        logger.info("Assigned role %r to user %s", role_name, user_id)

    async def add_claim(self, user_id: int, claim_type: str, claim_value: str) -> None:
        user = await self.get_user(user_id)
        await self.users.add_claim(user, claim_type, claim_value)
        logger.info("Added claim %s=%s to user %s", claim_type, claim_value, user_id)

    async def remove_role(self, user_id: int, role_name: str) -> None:
        """Remove a role. The Developer role can never be taken away."""
        user = await self.get_user(user_id)
        if normalize(role_name) == normalize(ROLE_DEVELOPER) and await self.users.is_in_role(
            user, ROLE_DEVELOPER
        ):
            logger.warning("Denied removal of %s role from user %s", ROLE_DEVELOPER, user_id)
            raise PermissionDeniedError(
                f"The '{ROLE_DEVELOPER}' role cannot be removed from a user.",
                error_code="PermissionDenied",
            )
        await self._require_role(role_name)
        await self.users.remove_from_role(user, role_name)
        logger.info("Removed role %r from user %s", role_name, user_id)

    async def remove_claim(self, user_id: int, claim_type: str, claim_value: str) -> None:
        """Remove a claim unless the user holds a protected role."""
        user = await self.get_user(user_id)
        if not await self.users.has_claim(user, claim_type, claim_value):
            raise NotFoundError(
                f"Claim '{claim_type}:{claim_value}' not found for user {user_id}.",
                error_code="ClaimNotFound",
            )
        await self._deny_if_protected(user, "remove claims from")
        await self.users.remove_claim(user, claim_type, claim_value)
        logger.info("Removed claim %s=%s from user %s", claim_type, claim_value, user_id)

    async def delete_user(self, user_id: int) -> None:
        user = await self.get_user(user_id)
        await self._deny_if_protected(user, "delete")
        await self.users.delete_user(user)
        logger.info("Deleted user %s", user_id)

    async def update_user_permissions(
        self,
        user_id: int,
        roles: Sequence[str] | None = None,
        claims: Sequence[ClaimItem] | None = None,
    ) -> None:
        """Make the user's roles and claims match the desired state.

        Roles are diffed against the current set. Claims are replaced per
        type: every existing claim of a type mentioned in ``claims`` is
        removed, then all of ``claims`` are added; other types stay.
        ``None`` leaves that side untouched. The Developer role is never
        removed, as in ``remove_role``. Every step is attempted;
        failures are collected and raised together at the end.
        """
        user = await self.get_user(user_id)
        failures: dict[str, list[str]] = {}

        def record(exc: AppError) -> None:
            failures.setdefault(exc.error_code or "Error", []).append(exc.message)
            logger.warning("Permission update for user %s: %s", user_id, exc.message)

        if roles is not None:
            current = {normalize(name): name for name in await self.users.get_roles(user)}
            desired: dict[str, str] = {}
            for name in roles:
                desired.setdefault(normalize(name), name)

            for key, name in current.items():
                if key in desired:
                    continue
                if key == normalize(ROLE_DEVELOPER):
                    record(
                        PermissionDeniedError(
                            f"The '{ROLE_DEVELOPER}' role cannot be removed from a user.",
                            error_code="PermissionDenied",
                        )
                    )
                    continue
                try:
                    await self.users.remove_from_role(user, name)
                except AppError as exc:
                    record(exc)

            for key, name in desired.items():
                if key in current:
                    continue
                try:
                    await self._require_role(name)
                    await self.users.add_to_role(user, name)
                except AppError as exc:
                    record(exc)

        if claims is not None:
            managed_types = {claim.type for claim in claims}
            for claim_type, claim_value in dict.fromkeys(await self.users.get_claims(user)):
                if claim_type in managed_types:
                    try:
                        await self.users.remove_claim(user, claim_type, claim_value)
                    except AppError as exc:
                        record(exc)
            for claim in claims:
                try:
                    await self.users.add_claim(user, claim.type, claim.value)
                except AppError as exc:
                    record(exc)

        if failures:
            raise ValidationError(
                f"Some permission changes for user {user_id} failed.",
                error_code="PermissionUpdateFailed",
                details=failures,
            )
        logger.info("Updated permissions for user %s", user_id)

    async def _require_role(self, role_name: str) -> None:
        if not await self.users.role_exists(role_name):
            raise NotFoundError(f"Role '{role_name}' not found.", error_code="RoleNotFound")

    async def _deny_if_protected(self, user: User, action: str) -> None:
        for role in PROTECTED_ROLES:
            if await self.users.is_in_role(user, role):
                logger.warning("Denied attempt to %s protected user %s", action, user.id)
                raise PermissionDeniedError(
                    f"Cannot {action} a user holding the '{role}' role.",
                    error_code="PermissionDenied",
                )
