from pydantic import BaseModel, conint
from typing import Optional
from datetime import datetime


class TableRead(BaseModel):
    id: int
    table_number: int
    seats: int
    is_reserved: bool
    reserved_by_user_id: Optional[int] = None
    reserved_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TableCreate(BaseModel):
    table_number: conint(ge=1)
    seats: int  # границы проверяет crud.table


class TableUpdate(BaseModel):
    table_number: conint(ge=1)
    seats: int
    is_reserved: bool = False
    reserved_by_user_id: Optional[int] = None

    class Config:
        extra = "forbid"
