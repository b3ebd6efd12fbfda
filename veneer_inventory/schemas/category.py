"""
Pydantic схемы категорий и подкатегорий.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    """Схема для создания категории."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, strict=True)

    name: str = Field(..., min_length=1, max_length=100, description="Название категории")


class CategoryUpdate(CategoryCreate):
    """Схема для переименования категории."""


class CategoryRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class CategoryOut(BaseModel):
    """Категория с количеством подкатегорий, посчитанным при чтении."""

    id: int
    name: str
    created_at: datetime
    sub_categories_count: int


class SubCategoryCreate(BaseModel):
    """Схема для создания подкатегории."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, strict=True)

    name: str = Field(..., min_length=1, max_length=100, description="Название подкатегории")
    category_id: int = Field(..., description="ID родительской категории")


class SubCategoryUpdate(BaseModel):
    """Схема для переименования подкатегории (категорию сменить нельзя)."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, strict=True)

    name: str = Field(..., min_length=1, max_length=100)


class SubCategoryRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: CategoryRef


class SubCategoryOut(BaseModel):
    """Подкатегория с количеством товаров, посчитанным при чтении."""

    id: int
    name: str
    category_id: int
    category: CategoryRef
    created_at: datetime
    products_count: int
