"""
Базовый класс для всех моделей SQLAlchemy.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Базовый класс для всех моделей (Declarative API SQLAlchemy 2.0)."""
    pass
