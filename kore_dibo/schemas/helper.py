# kore_dibo/schemas/helper.py
from pydantic import BaseModel

from kore_dibo.schemas.review import ReviewWithContext


class HelperPublic(BaseModel):
    id: int
    username: str
    full_name: str
    role: str
    bio: str | None = None
    skills: list[str] | None = None
    profile_image: str | None = None
    rating: int
    review_count: int

    model_config = {"from_attributes": True}


class HelperProfile(HelperPublic):
    reviews: list[ReviewWithContext] = []
