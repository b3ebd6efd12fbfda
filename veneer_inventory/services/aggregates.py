"""
Подсчет дочерних записей при чтении.

Количество подкатегорий в категории и товаров в подкатегории не хранится
в родительской записи и не кэшируется: каждое чтение пересчитывает его
по текущему состоянию БД.
"""

from typing import Dict, Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from veneer_inventory.db.models import Product, SubCategory


def sub_category_count(db: Session, category_id: int) -> int:
    """Количество подкатегорий категории."""
    stmt = select(func.count()).select_from(SubCategory).where(
        SubCategory.category_id == category_id
    )
    return db.scalar(stmt) or 0


def product_count(db: Session, sub_category_id: int) -> int:
    """Количество товаров подкатегории."""
    stmt = select(func.count()).select_from(Product).where(
        Product.sub_category_id == sub_category_id
    )
    return db.scalar(stmt) or 0


def sub_category_counts(db: Session, category_ids: Iterable[int]) -> Dict[int, int]:
    """
    Количество подкатегорий для набора категорий одним запросом.

    Returns:
        Dict[int, int]: category_id -> count, для всех переданных id
    """
    ids = list(category_ids)
    counts = dict.fromkeys(ids, 0)
    if not ids:
        return counts

    rows = db.execute(
        select(SubCategory.category_id, func.count())
        .where(SubCategory.category_id.in_(ids))
        .group_by(SubCategory.category_id)
    ).all()
    counts.update({category_id: count for category_id, count in rows})
    return counts


def product_counts(db: Session, sub_category_ids: Iterable[int]) -> Dict[int, int]:
    """Количество товаров для набора подкатегорий одним запросом."""
    ids = list(sub_category_ids)
    counts = dict.fromkeys(ids, 0)
    if not ids:
        return counts

    rows = db.execute(
        select(Product.sub_category_id, func.count())
        .where(Product.sub_category_id.in_(ids))
        .group_by(Product.sub_category_id)
    ).all()
    counts.update({sub_category_id: count for sub_category_id, count in rows})
    return counts
