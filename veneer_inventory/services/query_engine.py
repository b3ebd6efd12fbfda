"""
Поиск и фильтрация категорий, подкатегорий и товаров.

Переводит параметры запроса (поиск по подстроке, диапазон количества,
область категории/подкатегории) в SQLAlchemy запросы с пагинацией.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from veneer_inventory.db.models import Category, Product, SubCategory

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def _like_pattern(search: str) -> str:
    """Шаблон ILIKE для поиска подстроки; % и _ ищутся буквально."""
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@dataclass
class ProductFilter:
    """
    Фильтр товаров.

    category_id учитывается только если sub_category_id не задан.
    Границы qty_min / qty_max включительные, None - без ограничения.
    """

    sub_category_id: Optional[int] = None
    category_id: Optional[int] = None
    search: Optional[str] = None
    qty_min: Optional[float] = None
    qty_max: Optional[float] = None


@dataclass
class Page:
    items: List[Product]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        if self.limit < 1:
            return 0
        return math.ceil(self.total / self.limit)


def search_categories(db: Session, search: Optional[str] = None) -> List[Category]:
    """Категории по подстроке имени, по имени по возрастанию."""
    stmt = select(Category)
    if search:
        stmt = stmt.where(Category.name.ilike(_like_pattern(search), escape="\\"))
    stmt = stmt.order_by(Category.name.asc(), Category.id.asc())
    return list(db.scalars(stmt).all())


def search_sub_categories(
    db: Session,
    category_id: Optional[int] = None,
    search: Optional[str] = None,
) -> List[SubCategory]:
    """Подкатегории (опционально в пределах категории), по имени по возрастанию."""
    stmt = select(SubCategory)
    if category_id is not None:
        stmt = stmt.where(SubCategory.category_id == category_id)
    if search:
        stmt = stmt.where(SubCategory.name.ilike(_like_pattern(search), escape="\\"))
    stmt = stmt.order_by(SubCategory.name.asc(), SubCategory.id.asc())
    return list(db.scalars(stmt).all())


def sub_category_ids_for(db: Session, category_id: int) -> List[int]:
    """ID всех подкатегорий категории."""
    return list(
        db.scalars(select(SubCategory.id).where(SubCategory.category_id == category_id)).all()
    )


def product_conditions(db: Session, filters: ProductFilter) -> list:
    """
    Условия WHERE для товаров.

    Товар не хранит category_id, поэтому фильтр по категории
    сначала разрешается в набор ID ее подкатегорий.
    """
    conditions = []
    if filters.sub_category_id is not None:
        conditions.append(Product.sub_category_id == filters.sub_category_id)
    elif filters.category_id is not None:
        ids = sub_category_ids_for(db, filters.category_id)
        conditions.append(Product.sub_category_id.in_(ids))

    if filters.search:
        conditions.append(Product.name.ilike(_like_pattern(filters.search), escape="\\"))
    if filters.qty_min is not None:
        conditions.append(Product.qty >= filters.qty_min)
    if filters.qty_max is not None:
        conditions.append(Product.qty <= filters.qty_max)
    return conditions


def search_products(
    db: Session,
    filters: ProductFilter,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
) -> Page:
    """
    Товары по фильтру с пагинацией.

    Сортировка: последние измененные первыми, при равенстве updated_at -
    в порядке добавления (id по возрастанию).

    Args:
        db: Сессия базы данных
        filters: Параметры фильтрации
        page: Номер страницы (с 1)
        limit: Размер страницы

    Returns:
        Page: Товары страницы и общее количество подходящих
    """
    # page >= 1, limit в пределах 1..MAX_LIMIT
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_LIMIT)

    conditions = product_conditions(db, filters)

    # Подсчет общего количества (отдельно, без ORDER/LIMIT)
    count_stmt = select(func.count()).select_from(Product).where(*conditions)
    total = db.scalar(count_stmt) or 0

    stmt = (
        select(Product)
        .where(*conditions)
        .order_by(Product.updated_at.desc(), Product.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    items = list(db.scalars(stmt).unique().all())
    return Page(items=items, total=total, page=page, limit=limit)
