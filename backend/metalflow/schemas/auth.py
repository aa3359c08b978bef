"""Authentication and permission-management schemas."""

from datetime import datetime

from pydantic import EmailStr, Field, ValidationInfo, field_validator

from metalflow.schemas.common import CamelModel


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(CamelModel):
    token: str
    user_id: int
    username: str
    expires_at: datetime


class RegisterRequest(CamelModel):
    username: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    confirm_password: str

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if "password" in info.data and value != info.data["password"]:
            raise ValueError("The password and confirmation password do not match.")
        return value


class AssignRoleRequest(CamelModel):
    user_id: int = Field(..., ge=1)
    role_name: str = Field(..., min_length=1, max_length=50)


class ClaimRequest(CamelModel):
    user_id: int = Field(..., ge=1)
    claim_type: str = Field(..., min_length=1, max_length=100)
    claim_value: str = Field(..., min_length=1, max_length=256)


class ClaimItem(CamelModel):
    type: str = Field(..., min_length=1, max_length=100)
    value: str = Field(..., min_length=1, max_length=256)


class UpdateUserPermissionsRequest(CamelModel):
    """Desired roles and claims. Omitted lists leave that side untouched."""

    user_id: int = Field(..., ge=1)
    roles: list[str] | None = None
    claims: list[ClaimItem] | None = None


class ClaimResponse(CamelModel):
    type: str
    value: str


class MessageResponse(CamelModel):
    message: str
