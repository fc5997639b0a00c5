# kore_dibo/schemas/doubt.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from kore_dibo.schemas.user import HelperSummary, UserSummary


class DoubtCreate(BaseModel):
    title: str = Field(min_length=3, max_length=255)
    question: str = Field(min_length=10)
    subject: str = Field(min_length=1, max_length=100)
    sub_topic: str | None = None
    image: str | None = None
    budget: int = Field(default=100, gt=0)


class DoubtUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=3, max_length=255)
    question: str | None = Field(default=None, min_length=10)
    subject: str | None = Field(default=None, min_length=1, max_length=100)
    sub_topic: str | None = None
    image: str | None = None
    budget: int | None = Field(default=None, gt=0)
    # the owner may only close a doubt; answering happens through acceptance
    status: Literal["closed"] | None = None


class DoubtPublic(BaseModel):
    id: int
    title: str
    question: str
    subject: str
    sub_topic: str | None = None
    image: str | None = None
    budget: int
    student_id: int
    helper_id: int | None = None
    status: str  # open / answered / closed
    created_at: datetime

    model_config = {"from_attributes": True}


class AnswerCreate(BaseModel):
    doubt_id: int
    answer: str = Field(min_length=10)
    image: str | None = None


class AnswerPublic(BaseModel):
    id: int
    doubt_id: int
    helper_id: int
    answer: str
    image: str | None = None
    is_accepted: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AnswerWithHelper(AnswerPublic):
    helper: HelperSummary | None = None


class DoubtWithStudent(DoubtPublic):
    answer_count: int
    student: UserSummary | None = None


class DoubtDetail(DoubtPublic):
    student: UserSummary | None = None
    answers: list[AnswerWithHelper] = []
