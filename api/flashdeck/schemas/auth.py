from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from flashdeck.models.enums import Plan


class LoginRequest(BaseModel):
    """Login request schema."""
    username: str = Field(..., description="Username or email")
    password: str = Field(..., min_length=1, description="Password")


class RegisterRequest(BaseModel):
    """Registration request schema."""
    username: str = Field(..., min_length=3, max_length=50, description="Username")
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=6, description="Password (minimum 6 characters)")


class UpdatePlanRequest(BaseModel):
    """Plan change request schema."""
    plan: Plan = Field(..., description="New plan: 'free' or 'pro'")


class UserResponse(BaseModel):
    """User response schema (without password)."""
    id: int
    username: str
    email: str
    plan: Plan
    features: list[str] = []
    created_at: datetime

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Authentication response schema."""
    user: UserResponse
    message: str
