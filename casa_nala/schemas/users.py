"""
User and Session Schemas for Casa Nala
======================================

Endpoint Coverage:
------------------
- POST /login: Email/password login, sets the auth cookie
- GET /login: Login prompt (echoes redirectedFrom)
- POST /logout: Close the session
- GET /me: Current session context
- GET /admin: Console sections visible to the caller's role
- POST /admin/users: Create a user profile (admin only)
- PUT /admin/users/{id}/role: Change a user's role (admin only)
"""

from typing import List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..enums import Role


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    user_id: str
    role: Role
    redirect_to: Optional[str] = None


class LoginPrompt(BaseModel):
    message: str
    redirected_from: Optional[str] = None


class SessionOut(BaseModel):
    authenticated: bool
    user_id: Optional[str] = None
    email: Optional[str] = None
    role: Role


class AdminSectionOut(BaseModel):
    title: str
    path: str
    description: str


class AdminConsoleOut(BaseModel):
    role: Role
    sections: List[AdminSectionOut]


class UserCreate(BaseModel):
    email: str
    password: str = Field(min_length=8)
    display_name: Optional[str] = None
    role: Role = Role.CLIENTE

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str) -> str:
        try:
            return validate_email(v, check_deliverability=False).normalized.lower()
        except EmailNotValidError as exc:
            raise ValueError(str(exc))


class RoleUpdate(BaseModel):
    role: Role


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    display_name: Optional[str] = None
    role: Role
    is_active: bool
