"""SQLAlchemy-backed identity store: users, roles, claims and lockout."""

import enum
import logging
import re
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from metalflow.core.config import settings
from metalflow.core.exceptions import NotFoundError, ValidationError
from metalflow.core.security import get_password_hash, verify_password
from metalflow.models.identity import Role, User, UserClaim

logger = logging.getLogger(__name__)


class SignInResult(enum.Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    LOCKED_OUT = "locked_out"


def normalize(name: str) -> str:
    return name.strip().upper()


def password_errors(password: str) -> dict[str, list[str]]:
    """Return password-policy violations keyed by error code."""
    errors: dict[str, list[str]] = {}
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        errors["PasswordTooShort"] = [
            f"Passwords must be at least {settings.PASSWORD_MIN_LENGTH} characters."
        ]
    if not re.search(r"\d", password):
        errors["PasswordRequiresDigit"] = ["Passwords must have at least one digit ('0'-'9')."]
    if not re.search(r"[a-z]", password):
        errors["PasswordRequiresLower"] = ["Passwords must have at least one lowercase ('a'-'z')."]
    if not re.search(r"[A-Z]", password):
        errors["PasswordRequiresUpper"] = ["Passwords must have at least one uppercase ('A'-'Z')."]
    if not re.search(r"[^0-9A-Za-z]", password):
        errors["PasswordRequiresNonAlphanumeric"] = [
            "Passwords must have at least one non alphanumeric character."
        ]
    return errors


class UserStore:
    """Identity capability used by ``AuthService``.

    Users load their roles and claims eagerly, so every method here can
    read ``user.roles`` and ``user.claims`` without further I/O.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # --- users ---

    async def find_by_id(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def find_by_name(self, username: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.normalized_username == normalize(username))
        )
        return result.scalar_one_or_none()

    async def create_user(self, username: str, email: str, password: str) -> User:
        """Create a user, enforcing password policy and unique usernames."""
        errors = password_errors(password)
        if await self.find_by_name(username) is not None:
            errors["DuplicateUserName"] = [f"Username '{username}' is already taken."]
        if errors:
            raise ValidationError(
                "User registration failed.", error_code="RegistrationFailed", details=errors
            )

        user = User(
            username=username,
            normalized_username=normalize(username),
            email=email,
            password_hash=get_password_hash(password),
            access_failed_count=0,
            lockout_end=None,
            roles=[],
            claims=[],
        )
        self.db.add(user)
        await self.db.flush()
        return user

    async def delete_user(self, user: User) -> None:
        await self.db.delete(user)
        await self.db.flush()

    async def password_sign_in(self, username: str, password: str) -> SignInResult:
        """Check credentials, tracking consecutive failures.

        Reaching ``LOCKOUT_MAX_FAILED_ATTEMPTS`` failures locks the account
        for ``LOCKOUT_MINUTES``; a successful sign-in resets the counter.
        """
        user = await self.find_by_name(username)
        if user is None:
            return SignInResult.FAILED

        now = datetime.now(timezone.utc)
        if user.lockout_end is not None and user.lockout_end > now:
            return SignInResult.LOCKED_OUT

        if verify_password(password, user.password_hash):
            user.access_failed_count = 0
            user.lockout_end = None
            await self.db.flush()
            return SignInResult.SUCCEEDED

        user.access_failed_count += 1
        if user.access_failed_count >= settings.LOCKOUT_MAX_FAILED_ATTEMPTS:
            user.access_failed_count = 0
            user.lockout_end = now + timedelta(minutes=settings.LOCKOUT_MINUTES)
            await self.db.flush()
            logger.warning("User %s locked out until %s", user.id, user.lockout_end)
            return SignInResult.LOCKED_OUT

        await self.db.flush()
        return SignInResult.FAILED

    # --- roles ---

    async def find_role(self, role_name: str) -> Role | None:
        result = await self.db.execute(
            select(Role).where(Role.normalized_name == normalize(role_name))
        )
        return result.scalar_one_or_none()

    async def role_exists(self, role_name: str) -> bool:
        return await self.find_role(role_name) is not None

    async def create_role(self, role_name: str) -> Role:
        role = Role(name=role_name, normalized_name=normalize(role_name))
        self.db.add(role)
        await self.db.flush()
        return role

    async def get_roles(self, user: User) -> list[str]:
        return [role.name for role in user.roles]

    async def is_in_role(self, user: User, role_name: str) -> bool:
        wanted = normalize(role_name)
        return any(role.normalized_name == wanted for role in user.roles)

    async def add_to_role(self, user: User, role_name: str) -> None:
        role = await self.find_role(role_name)
        if role is None:
            raise NotFoundError(f"Role '{role_name}' not found.", error_code="RoleNotFound")
        if await self.is_in_role(user, role_name):
            message = f"User already in role '{role.name}'."
            raise ValidationError(
                message, error_code="UserAlreadyInRole", details={"UserAlreadyInRole": [message]}
            )
        user.roles.append(role)
        await self.db.flush()

    async def remove_from_role(self, user: User, role_name: str) -> None:
        wanted = normalize(role_name)
        role = next((r for r in user.roles if r.normalized_name == wanted), None)
        if role is None:
            message = f"User is not in role '{role_name}'."
            raise ValidationError(
                message, error_code="UserNotInRole", details={"UserNotInRole": [message]}
            )
        user.roles.remove(role)
        await self.db.flush()

    # --- claims ---

    async def get_claims(self, user: User) -> list[tuple[str, str]]:
        return [(claim.claim_type, claim.claim_value) for claim in user.claims]

    async def has_claim(self, user: User, claim_type: str, claim_value: str) -> bool:
        return (claim_type, claim_value) in await self.get_claims(user)

    async def add_claim(self, user: User, claim_type: str, claim_value: str) -> None:
        user.claims.append(UserClaim(claim_type=claim_type, claim_value=claim_value))
        await self.db.flush()

    async def remove_claim(self, user: User, claim_type: str, claim_value: str) -> None:
        """Remove every claim of the user matching type and value."""
        matching = [
            claim
            for claim in user.claims
            if claim.claim_type == claim_type and claim.claim_value == claim_value
        ]
        if not matching:
            raise NotFoundError(
                f"Claim '{claim_type}:{claim_value}' not found for user {user.id}.",
                error_code="ClaimNotFound",
            )
        for claim in matching:
            user.claims.remove(claim)
        await self.db.flush()
