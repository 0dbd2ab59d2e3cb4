from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal


class DishRead(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    price: Decimal
    is_available: bool
    created_at: datetime

    class Config:
        from_attributes = True


class DishCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    price: Decimal = Field(..., ge=0)
    category: Optional[str] = Field(None, max_length=64)
    is_available: bool = True


class DishUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    price: Optional[Decimal] = Field(None, ge=0)
    category: Optional[str] = Field(None, max_length=64)
    is_available: Optional[bool] = None

    class Config:
        extra = "forbid"
