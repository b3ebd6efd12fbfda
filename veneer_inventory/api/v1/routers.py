"""
Основной роутер API v1.

Подключает все endpoint'ы приложения. Роутеры инвентаря подключены
за проверкой JWT токена: без валидного токена ни одна операция
не выполняется.
"""

from fastapi import APIRouter, Depends

from veneer_inventory.api.v1.endpoints import auth, categories, products, sub_categories
from veneer_inventory.core.auth import get_current_user

# Создание основного роутера API v1
api_router = APIRouter()

protected = [Depends(get_current_user)]

# Префиксы ресурсов инвентаря, закрытых проверкой токена
PROTECTED_PREFIXES = ("/categories", "/subcategories", "/products")

# Подключение роутеров для различных ресурсов
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(
    categories.router, prefix="/categories", tags=["categories"], dependencies=protected
)
api_router.include_router(
    sub_categories.router, prefix="/subcategories", tags=["subcategories"], dependencies=protected
)
api_router.include_router(
    products.router, prefix="/products", tags=["products"], dependencies=protected
)
