"""
Pydantic schemas for authentication endpoints.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.db.models.user import UserRole
from app.schemas.common import CamelModel


class SignupRequest(CamelModel):
    """Request schema for user signup."""
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=8, description="User's password (min 8 characters)")
    display_name: Optional[str] = Field(default=None, max_length=200, description="Name shown to recruiters / candidates")
    role: UserRole = Field(..., description="'recruiter' or 'candidate', fixed at sign-up")

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        """Validate password length in bytes (bcrypt limit is 72 bytes)."""
        password_bytes = v.encode("utf-8")
        if len(password_bytes) > 72:
            raise ValueError("Password too long (bcrypt limit 72 bytes)")
        if len(password_bytes) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "email": "jane.doe@example.com",
                "password": "SecurePass123",
                "displayName": "Jane Doe",
                "role": "recruiter"
            }
        }


class SignupResponse(CamelModel):
    success: bool = True
    message: str = "User created successfully"
    user_id: str


class TokenResponse(BaseModel):
    """OAuth2 token response; keys stay snake_case as the OAuth2 flow expects."""
    access_token: str
    token_type: str = "bearer"
