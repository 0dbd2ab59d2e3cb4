import enum
from sqlalchemy import Column, Integer, Numeric, String, DateTime, ForeignKey, Enum as SAEnum, func
from sqlalchemy.orm import relationship
from ..db.base import Base


class OrderStatusEnum(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY = "READY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    full_price = Column(Numeric(10, 2), nullable=False, default=0)
    addition = Column(String(500), nullable=True)
    status = Column(SAEnum(OrderStatusEnum, name="order_status"), nullable=False, default=OrderStatusEnum.PENDING)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # позиции в порядке добавления, повторы хранятся отдельными строками
    items = relationship(
        "OrderDish",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderDish.position",
        lazy="selectin",
    )

    @property
    def dish_ids(self) -> list[int]:
        return [item.dish_id for item in self.items]


class OrderDish(Base):
    __tablename__ = "order_dishes"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    dish_id = Column(Integer, ForeignKey("dishes.id"), nullable=False)
    position = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # фиксируется на момент пересчёта

    order = relationship("Order", back_populates="items")
