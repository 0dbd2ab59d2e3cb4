from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from ..models import OrderStatusEnum


class OrderRead(BaseModel):
    id: int
    user_id: int
    dish_ids: List[int]
    full_price: Decimal
    addition: Optional[str] = None
    status: OrderStatusEnum
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OrderCreate(BaseModel):
    user_id: int
    dish_ids: List[int]
    addition: Optional[str] = Field(None, max_length=500)
    status: Optional[str] = None


class OrderUpdate(BaseModel):
    dish_ids: List[int]
    addition: Optional[str] = Field(None, max_length=500)
    status: Optional[str] = None

    class Config:
        extra = "forbid"


class OrderStatusUpdate(BaseModel):
    status: str
