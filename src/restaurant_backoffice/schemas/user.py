from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from ..models import RoleEnum


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: RoleEnum
    created_at: datetime

    class Config:
        from_attributes = True


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    role: RoleEnum = RoleEnum.user


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    role: Optional[RoleEnum] = None

    class Config:
        extra = "forbid"
