"""
Схемы для пагинации.
"""

import math

from pydantic import BaseModel


class PageMeta(BaseModel):
    """
    Метаданные пагинации.

    Attributes:
        page: Номер текущей страницы (с 1)
        limit: Размер страницы
        total: Общее количество подходящих записей
        pages: Общее количество страниц, ceil(total / limit)
    """

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def create(cls, page: int, limit: int, total: int) -> "PageMeta":
        """
        Создает экземпляр PageMeta с автоматическим расчетом pages.

        Args:
            page: Номер текущей страницы
            limit: Размер страницы
            total: Общее количество записей

        Returns:
            PageMeta: Экземпляр с рассчитанными метаданными
        """
        pages = math.ceil(total / limit) if limit > 0 else 0
        return cls(page=page, limit=limit, total=total, pages=pages)
