from pydantic import BaseModel, Field, conint
from typing import Optional
from datetime import datetime


class ReviewRead(BaseModel):
    id: int
    user_id: Optional[int] = None  # None, если автор удалён
    dish_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ReviewCreate(BaseModel):
    dish_id: int
    rating: conint(ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)


class ReviewUpdate(BaseModel):
    rating: conint(ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)

    class Config:
        extra = "forbid"
