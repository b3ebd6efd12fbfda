"""
Модель подкатегории.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class SubCategory(Base):
    """
    Модель подкатегории.

    Attributes:
        id: Уникальный идентификатор подкатегории
        name: Название (уникально в пределах категории)
        category_id: ID родительской категории
        created_at: Дата создания
        category: Связь с категорией
    """

    __tablename__ = "sub_categories"

    __table_args__ = (
        UniqueConstraint("name", "category_id", name="uq_sub_category_name_category"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categories.id"), index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Удаление дочерних записей выполняет services.cascade, не ORM
    category: Mapped["Category"] = relationship(lazy="joined")

    def __repr__(self) -> str:
        return f"<SubCategory(id={self.id}, name='{self.name}', category_id={self.category_id})>"
