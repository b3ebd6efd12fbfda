"""
Сервис подкатегорий.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from veneer_inventory.core.errors import Conflict, NotFound
from veneer_inventory.db.database import commit
from veneer_inventory.db.models import Category, SubCategory
from veneer_inventory.schemas.category import (
    CategoryRef,
    SubCategoryCreate,
    SubCategoryOut,
    SubCategoryUpdate,
)
from veneer_inventory.services import aggregates, cascade, query_engine

logger = logging.getLogger(__name__)


class SubCategoryService:
    """Подкатегории: имя уникально (без учета регистра) в пределах категории."""

    def _get_or_404(self, db: Session, sub_category_id: int) -> SubCategory:
        sub_category = db.get(SubCategory, sub_category_id)
        if sub_category is None:
            raise NotFound("SubCategory not found")
        return sub_category

    def _ensure_unique(
        self, db: Session, name: str, category_id: int, exclude_id: Optional[int] = None
    ) -> None:
        stmt = select(SubCategory.id).where(
            func.lower(SubCategory.name) == name.lower(),
            SubCategory.category_id == category_id,
        )
        if exclude_id is not None:
            stmt = stmt.where(SubCategory.id != exclude_id)
        if db.scalar(stmt.limit(1)) is not None:
            raise Conflict("SubCategory already exists in this category")

    def to_out(self, sub_category: SubCategory, products_count: int) -> SubCategoryOut:
        return SubCategoryOut(
            id=sub_category.id,
            name=sub_category.name,
            category_id=sub_category.category_id,
            category=CategoryRef.model_validate(sub_category.category),
            created_at=sub_category.created_at,
            products_count=products_count,
        )

    def list_sub_categories(
        self,
        db: Session,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[SubCategoryOut]:
        sub_categories = query_engine.search_sub_categories(db, category_id, search)
        counts = aggregates.product_counts(db, [sc.id for sc in sub_categories])
        return [self.to_out(sc, counts[sc.id]) for sc in sub_categories]

    def get_sub_category(self, db: Session, sub_category_id: int) -> SubCategoryOut:
        sub_category = self._get_or_404(db, sub_category_id)
        return self.to_out(sub_category, aggregates.product_count(db, sub_category.id))

    def create_sub_category(self, db: Session, data: SubCategoryCreate) -> SubCategoryOut:
        if db.get(Category, data.category_id) is None:
            raise NotFound("Category not found")
        self._ensure_unique(db, data.name, data.category_id)

        sub_category = SubCategory(name=data.name, category_id=data.category_id)
        db.add(sub_category)
        commit(db)
        db.refresh(sub_category)

        logger.info(
            "Created sub-category %s '%s' in category %s",
            sub_category.id, sub_category.name, sub_category.category_id,
        )
        return self.to_out(sub_category, 0)

    def update_sub_category(
        self, db: Session, sub_category_id: int, data: SubCategoryUpdate
    ) -> SubCategoryOut:
        sub_category = self._get_or_404(db, sub_category_id)
        self._ensure_unique(db, data.name, sub_category.category_id, exclude_id=sub_category_id)

        sub_category.name = data.name
        commit(db)
        db.refresh(sub_category)
        return self.to_out(sub_category, aggregates.product_count(db, sub_category.id))

    def delete_sub_category(self, db: Session, sub_category_id: int) -> cascade.CascadeResult:
        return cascade.delete_sub_category(db, sub_category_id)


sub_category_service = SubCategoryService()
