"""
API endpoints для работы с категориями.

Удаление категории каскадно удаляет ее подкатегории и их товары.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from veneer_inventory.core.auth import require_delete_passcode
from veneer_inventory.db.database import get_db
from veneer_inventory.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from veneer_inventory.services.category_service import category_service

router = APIRouter()


@router.get("", response_model=List[CategoryOut])
def list_categories(
    db: Session = Depends(get_db),
    search: Optional[str] = Query(None, description="Поиск по названию (без учета регистра)"),
):
    """
    Получить список категорий, отсортированный по названию.

    Args:
        db: Сессия базы данных
        search: Подстрока названия

    Returns:
        List[CategoryOut]: Категории с количеством подкатегорий
    """
    return category_service.list_categories(db, search)


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, db: Session = Depends(get_db)):
    """
    Получить категорию по ID.

    Raises:
        NotFound: Если категория не найдена
    """
    return category_service.get_category(db, category_id)


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(data: CategoryCreate, db: Session = Depends(get_db)):
    """Создать категорию; имя уникально без учета регистра."""
    return category_service.create_category(db, data)


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(category_id: int, data: CategoryUpdate, db: Session = Depends(get_db)):
    """Переименовать категорию."""
    return category_service.update_category(db, category_id, data)


@router.delete("/{category_id}", dependencies=[Depends(require_delete_passcode)])
def delete_category(category_id: int, db: Session = Depends(get_db)):
    """
    Удалить категорию вместе со всеми подкатегориями и товарами.

    Returns:
        dict: Сообщение и количество удаленных записей
    """
    result = category_service.delete_category(db, category_id)
    return {
        "message": "Category and all related data deleted",
        "deleted": {
            "sub_categories": result.sub_categories,
            "products": result.products,
        },
    }
