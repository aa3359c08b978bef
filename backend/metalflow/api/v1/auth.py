"""Authentication and permission-management API endpoints."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from metalflow.api.deps import get_auth_service
from metalflow.api.errors import app_error_response, problem_response
from metalflow.core.auth import (
    CanAssignRoles,
    CanDeleteUsers,
    CanRemoveClaims,
    CanRemoveRoles,
    LoggedInOnly,
    Principal,
)
from metalflow.core.exceptions import ValidationError
from metalflow.schemas.auth import (
    AssignRoleRequest,
    ClaimRequest,
    ClaimResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    UpdateUserPermissionsRequest,
)
from metalflow.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def _claims(pairs: list[tuple[str, str]]) -> list[ClaimResponse]:
    return [ClaimResponse(type=claim_type, value=value) for claim_type, value in pairs]


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse | JSONResponse:
    """Exchange credentials for a bearer token."""
    result = await service.authenticate(payload.username, payload.password)
    if result is None:
        # Returned rather than raised so the failed-attempt counter is committed.
        return problem_response(
            request,
            401,
            "Authentication failed.",
            "Invalid username or password, or the account is locked.",
            "InvalidCredentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return result


@router.post("/register", response_model=MessageResponse)
async def register(
    payload: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Create an account holding the default role."""
    await service.register(payload.username, payload.email, payload.password)
    return MessageResponse(message="User registered successfully.")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    principal: Principal = LoggedInOnly,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Log the caller out. Tokens stay valid until they expire."""
    await service.logout(principal.username)
    return MessageResponse(message="Logged out.")


@router.post("/assign-role", response_model=MessageResponse)
async def assign_role(
    payload: AssignRoleRequest,
    principal: Principal = CanAssignRoles,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Grant an existing role to a user."""
    await service.assign_role(payload.user_id, payload.role_name)
    return MessageResponse(
        message=f"Role '{payload.role_name}' assigned to user {payload.user_id}."
    )


@router.post("/add-claim", response_model=MessageResponse)
async def add_claim(
    payload: ClaimRequest,
    principal: Principal = CanAssignRoles,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Attach a claim to a user."""
    await service.add_claim(payload.user_id, payload.claim_type, payload.claim_value)
    return MessageResponse(
        message=f"Claim '{payload.claim_type}:{payload.claim_value}' added to user {payload.user_id}."
    )


@router.post("/update-permissions", response_model=MessageResponse)
async def update_permissions(
    payload: UpdateUserPermissionsRequest,
    request: Request,
    principal: Principal = CanAssignRoles,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse | JSONResponse:
    """Replace a user's roles and/or claims with the desired state."""
    try:
        await service.update_user_permissions(payload.user_id, payload.roles, payload.claims)
    except ValidationError as exc:
        # Changes that did succeed are kept, so the request must still commit.
        return app_error_response(request, exc)
    return MessageResponse(message=f"Permissions updated for user {payload.user_id}.")


@router.delete("/remove-role", response_model=MessageResponse)
async def remove_role(
    payload: AssignRoleRequest,
    principal: Principal = CanRemoveRoles,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Take a role away from a user."""
    await service.remove_role(payload.user_id, payload.role_name)
    return MessageResponse(
        message=f"Role '{payload.role_name}' removed from user {payload.user_id}."
    )


@router.delete("/remove-claim", response_model=MessageResponse)
async def remove_claim(
    payload: ClaimRequest,
    principal: Principal = CanRemoveClaims,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Remove a claim from a user."""
    await service.remove_claim(payload.user_id, payload.claim_type, payload.claim_value)
    return MessageResponse(
        message=f"Claim '{payload.claim_type}:{payload.claim_value}' removed from user {payload.user_id}."
    )


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    principal: Principal = CanDeleteUsers,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Delete a user who holds no protected role."""
    await service.delete_user(user_id)
    return MessageResponse(message=f"User {user_id} deleted.")


@router.get("/user-roles/{user_id}", response_model=list[str])
async def get_user_roles(
    user_id: int,
    principal: Principal = CanAssignRoles,
    service: AuthService = Depends(get_auth_service),
) -> list[str]:
    """List the roles of any user."""
    return await service.get_user_roles(user_id)


@router.get("/user-claims/{user_id}", response_model=list[ClaimResponse])
async def get_user_claims(
    user_id: int,
    principal: Principal = CanAssignRoles,
    service: AuthService = Depends(get_auth_service),
) -> list[ClaimResponse]:
    """List the claims of any user."""
    return _claims(await service.get_user_claims(user_id))


@router.get("/my-roles", response_model=list[str])
async def get_my_roles(
    principal: Principal = LoggedInOnly,
    service: AuthService = Depends(get_auth_service),
) -> list[str]:
    """List the caller's own roles."""
    return await service.get_user_roles(principal.user_id)


@router.get("/my-claims", response_model=list[ClaimResponse])
async def get_my_claims(
    principal: Principal = LoggedInOnly,
    service: AuthService = Depends(get_auth_service),
) -> list[ClaimResponse]:
    """List the caller's own claims."""
    return _claims(await service.get_user_claims(principal.user_id))
