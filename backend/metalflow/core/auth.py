"""Authentication dependencies and authorization policies for API routes.

The caller is identified by an ``Authorization: Bearer <token>`` header.
Policies only look at the caller's own roles and claims; rules about the
*target* user of an operation live in ``AuthService``.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Annotated, Any

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from metalflow.core.exceptions import PermissionDeniedError, UnauthorizedError
from metalflow.core.security import RESERVED_CLAIMS, ROLE_CLAIM, decode_access_token

_bearer = HTTPBearer(auto_error=False)

ROLE_ADMIN = "Admin"
ROLE_OWNER = "Owner"
ROLE_DEVELOPER = "Developer"
ROLE_USER = "User"

PLANNING_CLAIM = ("Department", "Planning")


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, as described by its token."""

    user_id: int
    username: str
    roles: frozenset[str] = frozenset()
    claims: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    def is_in_role(self, role: str) -> bool:
        return role in self.roles

    def has_claim(self, claim_type: str, claim_value: str) -> bool:
        return (claim_type, claim_value) in self.claims

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Principal":
        roles = payload.get(ROLE_CLAIM) or []
        if isinstance(roles, str):
            roles = [roles]
        claims: list[tuple[str, str]] = []
        for key, value in payload.items():
            if key in RESERVED_CLAIMS:
                continue
            values = value if isinstance(value, list) else [value]
            claims.extend((key, str(v)) for v in values)
        return cls(
            user_id=int(payload["sub"]),
            username=str(payload.get("name", "")),
            roles=frozenset(roles),
            claims=tuple(claims),
        )


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(_bearer)] = None,
) -> Principal:
    """Resolve the caller from the bearer token.

    Raises UnauthorizedError when the header is missing or the token is
    invalid or expired.
    """
    if credentials is None:
        raise UnauthorizedError("Missing bearer token.")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedError("Invalid or expired token.")

    try:
        return Principal.from_payload(payload)
    except (KeyError, ValueError) as exc:
        raise UnauthorizedError("Malformed token subject.") from exc


def _any_role(principal: Principal, *roles: str) -> bool:
    return any(principal.is_in_role(role) for role in roles)


def can_assign_roles(principal: Principal) -> bool:
    """Owner or Developer, or an Admin from the planning department."""
    if _any_role(principal, ROLE_OWNER, ROLE_DEVELOPER):
        return True
    return principal.is_in_role(ROLE_ADMIN) and principal.has_claim(*PLANNING_CLAIM)


def can_delete_users(principal: Principal) -> bool:
    return _any_role(principal, ROLE_DEVELOPER, ROLE_OWNER, ROLE_ADMIN)


def can_remove_roles(principal: Principal) -> bool:
    return _any_role(principal, ROLE_DEVELOPER, ROLE_OWNER)


def can_remove_claims(principal: Principal) -> bool:
    return _any_role(principal, ROLE_DEVELOPER, ROLE_OWNER, ROLE_ADMIN)


def require_policy(
    name: str, check: Callable[[Principal], bool]
) -> Callable[..., Any]:
    """Build a dependency that admits callers satisfying ``check``."""

    async def _dependency(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Principal:
        if not check(principal):
            raise PermissionDeniedError(
                f"Policy '{name}' denies this operation.",
                error_code="PolicyDenied",
            )
        return principal

    _dependency.__name__ = f"require_{name}"
    return _dependency


LoggedInOnly = Depends(get_current_principal)
CanAssignRoles = Depends(require_policy("CanAssignRoles", can_assign_roles))
CanDeleteUsers = Depends(require_policy("CanDeleteUsers", can_delete_users))
CanRemoveRoles = Depends(require_policy("CanRemoveRoles", can_remove_roles))
CanRemoveClaims = Depends(require_policy("CanRemoveClaims", can_remove_claims))
