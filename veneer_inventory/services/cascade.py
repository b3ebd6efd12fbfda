"""
Каскадное удаление категорий и подкатегорий.

Удаление родителя удаляет всех потомков: категория -> ее подкатегории ->
их товары. Все шаги выполняются в одной транзакции сессии и фиксируются
одним commit; при ошибке транзакция откатывается целиком.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from veneer_inventory.core.errors import NotFound, StoreError
from veneer_inventory.db.database import commit
from veneer_inventory.db.models import Category, Product, SubCategory
from veneer_inventory.services.product_service import release_unreferenced_images

logger = logging.getLogger(__name__)


@dataclass
class CascadeResult:
    """Сколько записей удалено каскадом."""

    categories: int = 0
    sub_categories: int = 0
    products: int = 0


def delete_category(db: Session, category_id: int) -> CascadeResult:
    """
    Удалить категорию вместе со всеми подкатегориями и их товарами.

    Порядок: (a) ID подкатегорий, (b) товары этих подкатегорий,
    (c) подкатегории, (d) сама категория.

    Raises:
        NotFound: Категория не существует
        StoreError: Сбой БД, изменения откатываются
    """
    category = db.get(Category, category_id)
    if category is None:
        raise NotFound("Category not found")

    try:
        sub_category_ids = list(
            db.scalars(
                select(SubCategory.id).where(SubCategory.category_id == category_id)
            ).all()
        )
        images = list(
            db.scalars(
                select(Product.image).where(Product.sub_category_id.in_(sub_category_ids))
            ).all()
        )
        products = db.execute(
            delete(Product).where(Product.sub_category_id.in_(sub_category_ids))
        ).rowcount
        sub_categories = db.execute(
            delete(SubCategory).where(SubCategory.category_id == category_id)
        ).rowcount
        db.delete(category)
        db.flush()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Cascade delete of category %s failed", category_id)
        raise StoreError("Database error") from e

    commit(db)
    release_unreferenced_images(db, images)

    result = CascadeResult(categories=1, sub_categories=sub_categories, products=products)
    logger.info(
        "Deleted category %s with %s sub-categories and %s products",
        category_id, result.sub_categories, result.products,
    )
    return result


def delete_sub_category(db: Session, sub_category_id: int) -> CascadeResult:
    """
    Удалить подкатегорию вместе со всеми ее товарами.

    Raises:
        NotFound: Подкатегория не существует
        StoreError: Сбой БД, изменения откатываются
    """
    sub_category = db.get(SubCategory, sub_category_id)
    if sub_category is None:
        raise NotFound("SubCategory not found")

    try:
        images = list(
            db.scalars(
                select(Product.image).where(Product.sub_category_id == sub_category_id)
            ).all()
        )
        products = db.execute(
            delete(Product).where(Product.sub_category_id == sub_category_id)
        ).rowcount
        db.delete(sub_category)
        db.flush()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Cascade delete of sub-category %s failed", sub_category_id)
        raise StoreError("Database error") from e

    commit(db)
    release_unreferenced_images(db, images)

    logger.info("Deleted sub-category %s with %s products", sub_category_id, products)
    return CascadeResult(sub_categories=1, products=products)


def sweep_orphans(db: Session) -> CascadeResult:
    """
    Удалить записи, чей родитель больше не существует.

    Подкатегории без категории удаляются вместе со своими товарами,
    затем удаляются товары без подкатегории. Используется как
    периодическая проверка целостности (scripts/sweep_orphans.py).
    """
    try:
        orphan_sub_ids = list(
            db.scalars(
                select(SubCategory.id).where(
                    SubCategory.category_id.not_in(select(Category.id))
                )
            ).all()
        )
        images = list(
            db.scalars(
                select(Product.image).where(
                    or_(
                        Product.sub_category_id.in_(orphan_sub_ids),
                        Product.sub_category_id.not_in(select(SubCategory.id)),
                    )
                )
            ).all()
        )
        products = db.execute(
            delete(Product).where(Product.sub_category_id.in_(orphan_sub_ids))
        ).rowcount
        sub_categories = db.execute(
            delete(SubCategory).where(SubCategory.id.in_(orphan_sub_ids))
        ).rowcount
        products += db.execute(
            delete(Product).where(Product.sub_category_id.not_in(select(SubCategory.id)))
        ).rowcount
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Orphan sweep failed")
        raise StoreError("Database error") from e

    commit(db)
    release_unreferenced_images(db, images)

    if sub_categories or products:
        logger.warning(
            "Orphan sweep removed %s sub-categories and %s products",
            sub_categories, products,
        )
    return CascadeResult(sub_categories=sub_categories, products=products)
