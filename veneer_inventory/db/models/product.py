"""
Модель товара (листа шпона).
"""

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class Product(Base):
    """
    Модель товара.

    Attributes:
        id: Уникальный идентификатор товара
        name: Название товара
        sub_category_id: ID подкатегории
        qty: Количество на складе
        price: Цена
        billing: Объем к оплате
        image: URL, путь в хранилище или data URL изображения
        sample_location: Место хранения образца
        ghoda_location: Место хранения на стеллаже (ghoda)
        created_at: Дата создания
        updated_at: Дата последнего изменения
        sub_category: Связь с подкатегорией
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), index=True)
    sub_category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sub_categories.id"), index=True
    )
    qty: Mapped[float] = mapped_column(Float, default=0, index=True)
    price: Mapped[float] = mapped_column(Float, default=0)
    billing: Mapped[float] = mapped_column(Float, default=0)
    image: Mapped[str] = mapped_column(Text, default="")
    sample_location: Mapped[str] = mapped_column(String(200), default="")
    ghoda_location: Mapped[str] = mapped_column(String(200), default="")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, index=True
    )

    sub_category: Mapped["SubCategory"] = relationship(lazy="joined")

    @property
    def rakam(self) -> float:
        """Производное значение billing × price, не хранится."""
        return (self.billing or 0) * (self.price or 0)

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}')>"
