"""
Pydantic schemas for user accounts and login.

These schemas are used for request/response validation.
"""

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    """Base schema for User with common fields."""
    name: str = Field(..., max_length=255, description="Display name")
    email: EmailStr = Field(..., description="Email address (unique)")


class UserCreate(UserBase):
    """Schema for creating a new account."""
    password: str = Field(..., min_length=6, max_length=255, description="Plain text password (will be hashed)")


class UserOut(BaseModel):
    """Schema for user response (excludes password)."""
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class LoginAuth(BaseModel):
    """Schema for login request."""
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., description="Plain text password")


class LoginAuthResponse(BaseModel):
    """Schema for login response."""
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class SessionOut(BaseModel):
    """Claims of the current session."""
    user_id: int
    email: str
    name: str


class SuccessResponse(BaseModel):
    """Generic success response"""
    success: bool = True
    message: str
