import enum
from sqlalchemy import Column, Integer, String, DateTime, func, Enum
from ..db.base import Base


class RoleEnum(str, enum.Enum):
    admin = "admin"
    user = "user"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    role = Column(Enum(RoleEnum, name="user_role"), nullable=False, default=RoleEnum.user)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # заказы, отзывы и столики ссылаются на пользователя только внешним ключом
