# kore_dibo/schemas/user.py
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator


class UserSummary(BaseModel):
    """Minimal public identity used when embedding a user in another resource."""
    id: int
    username: str
    full_name: str
    profile_image: str | None = None

    model_config = {"from_attributes": True}


class HelperSummary(UserSummary):
    rating: int
    review_count: int


class ParticipantSummary(UserSummary):
    role: str


class UserPublic(BaseModel):
    id: int
    username: str
    full_name: str
    email: EmailStr
    role: str  # "student" / "helper"
    verified: bool
    bio: str | None = None
    skills: list[str] | None = None
    profile_image: str | None = None
    rating: int
    review_count: int
    created_at: datetime

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    full_name: str | None = Field(default=None, min_length=1, max_length=200)
    bio: str | None = None
    skills: list[str] | None = None
    profile_image: str | None = None

    @field_validator("full_name")
    @classmethod
    def full_name_not_null(cls, value: str | None) -> str:
        # the None default is not validated, so only an explicit null lands here
        if value is None:
            raise ValueError("Full name cannot be empty")
        return value
