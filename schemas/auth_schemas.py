from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, field_validator
import re


def _normalize_email(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


class RegisterRequest(BaseModel):
    full_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str

    @field_validator('full_name', mode='before')
    @classmethod
    def strip_full_name(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value):
        """
        Password must be at least 8 characters and contain:
        - At least one letter
        - At least one digit
        """
        if len(value) < 8:
            raise ValueError('Password must be at least 8 characters')

        if not re.search(r'[A-Za-z]', value):
            raise ValueError('Password must contain at least one letter')

        if not re.search(r'\d', value):
            raise ValueError('Password must contain at least one digit')

        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str


class LoginResponse(BaseModel):
    message: str
    payload: TokenPair


class TokenClaims(BaseModel):
    """Decoded access-token claim set."""
    user_id: UUID
    is_premium: bool
    premium_expired_at: Optional[datetime] = None
    iss: str
    sub: str
    iat: datetime
    exp: datetime
