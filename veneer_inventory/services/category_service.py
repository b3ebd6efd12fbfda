"""
Сервис категорий.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from veneer_inventory.core.errors import Conflict, NotFound
from veneer_inventory.db.database import commit
from veneer_inventory.db.models import Category
from veneer_inventory.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from veneer_inventory.services import aggregates, cascade, query_engine

logger = logging.getLogger(__name__)


class CategoryService:
    """Создание, чтение, переименование и удаление категорий."""

    def _get_or_404(self, db: Session, category_id: int) -> Category:
        category = db.get(Category, category_id)
        if category is None:
            raise NotFound("Category not found")
        return category

    def _ensure_unique(self, db: Session, name: str, exclude_id: Optional[int] = None) -> None:
        """Имя категории уникально без учета регистра."""
        stmt = select(Category.id).where(func.lower(Category.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        if db.scalar(stmt.limit(1)) is not None:
            raise Conflict("Category already exists")

    def to_out(self, category: Category, sub_categories_count: int) -> CategoryOut:
        return CategoryOut(
            id=category.id,
            name=category.name,
            created_at=category.created_at,
            sub_categories_count=sub_categories_count,
        )

    def list_categories(self, db: Session, search: Optional[str] = None) -> List[CategoryOut]:
        categories = query_engine.search_categories(db, search)
        counts = aggregates.sub_category_counts(db, [c.id for c in categories])
        return [self.to_out(c, counts[c.id]) for c in categories]

    def get_category(self, db: Session, category_id: int) -> CategoryOut:
        category = self._get_or_404(db, category_id)
        return self.to_out(category, aggregates.sub_category_count(db, category.id))

    def create_category(self, db: Session, data: CategoryCreate) -> CategoryOut:
        self._ensure_unique(db, data.name)

        category = Category(name=data.name)
        db.add(category)
        commit(db)
        db.refresh(category)

        logger.info("Created category %s '%s'", category.id, category.name)
        return self.to_out(category, 0)

    def update_category(self, db: Session, category_id: int, data: CategoryUpdate) -> CategoryOut:
        category = self._get_or_404(db, category_id)
        self._ensure_unique(db, data.name, exclude_id=category_id)

        category.name = data.name
        commit(db)
        db.refresh(category)
        return self.to_out(category, aggregates.sub_category_count(db, category.id))

    def delete_category(self, db: Session, category_id: int) -> cascade.CascadeResult:
        return cascade.delete_category(db, category_id)


category_service = CategoryService()
