# kore_dibo/schemas/auth.py
from typing import Literal

from pydantic import BaseModel, EmailStr, Field


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    username: str | None = None


class LoginRequest(BaseModel):
    username: str
    password: str


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=6, description="Password must be at least 6 characters")
    full_name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    role: Literal["student", "helper"]
    bio: str | None = None
    skills: list[str] | None = None
    profile_image: str | None = None


class VerifyRequest(BaseModel):
    email: EmailStr
    code: str = Field(min_length=1)


class ResendVerificationRequest(BaseModel):
    email: EmailStr
