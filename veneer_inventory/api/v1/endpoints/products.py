"""
API endpoints для работы с товарами.

Содержит CRUD операции для товаров с поддержкой поиска,
фильтрации по количеству, пагинации и загрузки изображений.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from veneer_inventory.core.auth import require_delete_passcode
from veneer_inventory.db.database import get_db
from veneer_inventory.schemas.product import ProductCreate, ProductOut, ProductPage, ProductUpdate
from veneer_inventory.services import query_engine
from veneer_inventory.services.product_service import product_service

router = APIRouter()


@router.get("", response_model=ProductPage)
def list_products(
    db: Session = Depends(get_db),
    sub_category_id: Optional[int] = Query(None, description="Фильтр по подкатегории"),
    category_id: Optional[int] = Query(
        None, description="Фильтр по категории (если не задана подкатегория)"
    ),
    search: Optional[str] = Query(None, description="Поиск по названию (ILIKE)"),
    qty_min: Optional[float] = Query(None, description="Минимальное количество, включительно"),
    qty_max: Optional[float] = Query(None, description="Максимальное количество, включительно"),
    page: int = Query(query_engine.DEFAULT_PAGE, ge=1, description="Номер страницы"),
    limit: int = Query(
        query_engine.DEFAULT_LIMIT, ge=1, le=query_engine.MAX_LIMIT, description="Размер страницы"
    ),
):
    """
    Получить товары подкатегории или категории с фильтрацией и пагинацией.

    Поддерживает:
    - Область: sub_category_id, либо category_id (все ее подкатегории)
    - Поиск по подстроке названия
    - Диапазон количества qty_min..qty_max
    - Пагинацию (сначала последние измененные)

    Returns:
        ProductPage: Товары и метаданные пагинации
    """
    filters = query_engine.ProductFilter(
        sub_category_id=sub_category_id,
        category_id=category_id,
        search=search,
        qty_min=qty_min,
        qty_max=qty_max,
    )
    return product_service.list_products(db, filters, page=page, limit=limit)


@router.get("/search", response_model=ProductPage)
def search_products(
    db: Session = Depends(get_db),
    search: Optional[str] = Query(None, description="Поиск по названию (ILIKE)"),
    qty_min: Optional[float] = Query(None),
    qty_max: Optional[float] = Query(None),
    page: int = Query(query_engine.DEFAULT_PAGE, ge=1),
    limit: int = Query(query_engine.DEFAULT_LIMIT, ge=1, le=query_engine.MAX_LIMIT),
):
    """Глобальный поиск товаров по всем категориям."""
    filters = query_engine.ProductFilter(search=search, qty_min=qty_min, qty_max=qty_max)
    return product_service.list_products(db, filters, page=page, limit=limit)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    """
    Получить товар по ID.

    Returns:
        ProductOut: Товар с rakam и названиями подкатегории/категории

    Raises:
        NotFound: Если товар не найден
    """
    return product_service.get_product(db, product_id)


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(data: ProductCreate, db: Session = Depends(get_db)):
    """
    Создать товар.

    Raises:
        NotFound: Подкатегория не существует
    """
    return product_service.create_product(db, data)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(product_id: int, data: ProductUpdate, db: Session = Depends(get_db)):
    """Частичное обновление товара; подкатегорию сменить нельзя."""
    return product_service.update_product(db, product_id, data)


@router.delete("/{product_id}", dependencies=[Depends(require_delete_passcode)])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    product_service.delete_product(db, product_id)
    return {"message": "Product deleted"}


@router.post("/{product_id}/image", response_model=ProductOut)
async def upload_product_image(
    product_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    """
    Загрузка изображения товара.

    Файл сохраняется в настроенное хранилище, а его URL записывается
    в поле image товара.

    Args:
        product_id: ID товара
        file: Загружаемый файл
        db: Сессия базы данных

    Returns:
        ProductOut: Обновленный товар
    """
    content = await file.read()
    return product_service.upload_image(db, product_id, file.filename, content)
