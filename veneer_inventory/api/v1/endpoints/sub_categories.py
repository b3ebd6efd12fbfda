"""
API endpoints для работы с подкатегориями.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from veneer_inventory.core.auth import require_delete_passcode
from veneer_inventory.db.database import get_db
from veneer_inventory.schemas.category import SubCategoryCreate, SubCategoryOut, SubCategoryUpdate
from veneer_inventory.services.sub_category_service import sub_category_service

router = APIRouter()


@router.get("", response_model=List[SubCategoryOut])
def list_sub_categories(
    db: Session = Depends(get_db),
    category_id: Optional[int] = Query(None, description="Фильтр по категории"),
    search: Optional[str] = Query(None, description="Поиск по названию"),
):
    """
    Получить подкатегории (опционально одной категории), по названию.

    Returns:
        List[SubCategoryOut]: Подкатегории с количеством товаров
    """
    return sub_category_service.list_sub_categories(db, category_id, search)


@router.get("/{sub_category_id}", response_model=SubCategoryOut)
def get_sub_category(sub_category_id: int, db: Session = Depends(get_db)):
    return sub_category_service.get_sub_category(db, sub_category_id)


@router.post("", response_model=SubCategoryOut, status_code=status.HTTP_201_CREATED)
def create_sub_category(data: SubCategoryCreate, db: Session = Depends(get_db)):
    """
    Создать подкатегорию.

    Raises:
        NotFound: Родительская категория не существует
        Conflict: Имя уже занято в этой категории
    """
    return sub_category_service.create_sub_category(db, data)


@router.put("/{sub_category_id}", response_model=SubCategoryOut)
def update_sub_category(
    sub_category_id: int, data: SubCategoryUpdate, db: Session = Depends(get_db)
):
    return sub_category_service.update_sub_category(db, sub_category_id, data)


@router.delete("/{sub_category_id}", dependencies=[Depends(require_delete_passcode)])
def delete_sub_category(sub_category_id: int, db: Session = Depends(get_db)):
    """Удалить подкатегорию вместе со всеми ее товарами."""
    result = sub_category_service.delete_sub_category(db, sub_category_id)
    return {
        "message": "SubCategory and all related products deleted",
        "deleted": {"products": result.products},
    }
