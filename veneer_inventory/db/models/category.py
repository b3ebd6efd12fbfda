"""
Модель категории шпона.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Category(Base):
    """
    Модель категории (верхний уровень иерархии).

    Attributes:
        id: Уникальный идентификатор категории
        name: Название категории (уникально в хранилище)
        created_at: Дата создания

    Note:
        Количество подкатегорий не хранится, а считается при чтении
        (см. services.aggregates).
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
