from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, CheckConstraint
from ..db.base import Base


class DiningTable(Base):
    __tablename__ = "dining_tables"
    __table_args__ = (
        CheckConstraint("seats >= 1", name="ck_dining_tables_seats_positive"),
        CheckConstraint(
            "(is_reserved AND reserved_by_user_id IS NOT NULL AND reserved_at IS NOT NULL)"
            " OR (NOT is_reserved AND reserved_by_user_id IS NULL AND reserved_at IS NULL)",
            name="ck_dining_tables_reservation_fields",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    table_number = Column(Integer, nullable=False, unique=True, index=True)
    seats = Column(Integer, nullable=False)

    # поля брони меняет только crud.table
    is_reserved = Column(Boolean, nullable=False, default=False)
    reserved_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    reserved_at = Column(DateTime(timezone=True), nullable=True)
