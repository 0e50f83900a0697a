"""
Pydantic schemas for request/response validation in the Users service.

These schemas define the structure of data for API requests and responses.
"""
from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator

from .config import MIN_PASSWORD_LENGTH

Role = Literal["admin", "user", "guest"]

class UserBase(BaseModel):
    """Base schema with common user attributes."""
    name: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)

class UserCreate(UserBase):
    """Schema for creating a new user by an admin."""
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, description="Initial password (min 8 chars)")
    role: Role = "user"

class UserRegister(UserBase):
    """Schema for self-registration with password."""
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, description="Password must be at least 8 characters")

class UserLogin(BaseModel):
    """Schema for username/password login."""
    username: str
    password: str

class Token(BaseModel):
    """Schema for JWT token response."""
    access_token: str
    token_type: str = "bearer"

class TokenData(BaseModel):
    """Schema for data stored in JWT token."""
    user_id: Optional[int] = None
    username: Optional[str] = None
    role: Optional[str] = None

class UserUpdate(BaseModel):
    """Schema for updating an existing user. All fields are optional."""
    name: Optional[str] = Field(default=None, min_length=1)

    @field_validator("name")
    @classmethod
    def reject_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("must not be null")
        return value

class RoleAssignment(BaseModel):
    """Schema for assigning a role to a user."""
    role: Role

class MasterAdminPromotion(BaseModel):
    """Schema for the one-time promotion of the caller to master admin."""
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)

class User(UserBase):
    """
    Schema for user responses, includes all database fields except password.

    Attributes:
        id (int): User's unique identifier
        name (str): User's display name
        username (str): Login name
        role (str): User role
        is_active (bool): Whether the account is active
        created_at (datetime): When the user was created
    """
    id: int
    role: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
