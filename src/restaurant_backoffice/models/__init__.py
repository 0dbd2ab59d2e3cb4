from .user import User, RoleEnum
from .dish import Dish
from .order import Order, OrderDish, OrderStatusEnum
from .table import DiningTable
from .review import Review

__all__ = [
    "User",
    "RoleEnum",
    "Dish",
    "Order",
    "OrderDish",
    "OrderStatusEnum",
    "DiningTable",
    "Review",
]
