"""
Модели базы данных.

Импортирует все модели для корректной работы SQLAlchemy.
"""

from .base import Base
from .category import Category
from .product import Product
from .sub_category import SubCategory
from .user import User

__all__ = [
    "Base",
    "Category",
    "SubCategory",
    "Product",
    "User",
]
