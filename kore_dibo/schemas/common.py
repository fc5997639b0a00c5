# kore_dibo/schemas/common.py
from pydantic import BaseModel


class StatusResponse(BaseModel):
    message: str


class CountResponse(BaseModel):
    count: int
