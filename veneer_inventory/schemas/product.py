"""
Pydantic схемы товаров.
"""

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from veneer_inventory.schemas.category import SubCategoryRef
from veneer_inventory.schemas.pagination import PageMeta
from veneer_inventory.services.image_service import image_service


def _check_image(value: Optional[str]) -> Optional[str]:
    if value:
        image_service.validate_reference(value)
    return value


ImageRef = Annotated[Optional[str], AfterValidator(_check_image)]

# Верхняя граница qty/price/billing: rakam = billing × price остается конечным
MAX_AMOUNT = 1e12


class ProductCreate(BaseModel):
    """Схема для создания товара."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, strict=True)

    name: str = Field(..., min_length=1, max_length=200, description="Название товара")
    sub_category_id: int = Field(..., description="ID подкатегории")
    qty: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False, description="Количество")
    price: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False, description="Цена")
    billing: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False, description="Billing")
    image: ImageRef = Field(None, description="URL или data URL изображения")
    sample_location: Optional[str] = Field(None, max_length=200)
    ghoda_location: Optional[str] = Field(None, max_length=200)


class ProductUpdate(BaseModel):
    """
    Схема для частичного обновления товара.

    Изменяются только переданные поля; sub_category_id менять нельзя.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, strict=True)

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    qty: Optional[float] = Field(None, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    price: Optional[float] = Field(None, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    billing: Optional[float] = Field(None, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    image: ImageRef = None
    sample_location: Optional[str] = Field(None, max_length=200)
    ghoda_location: Optional[str] = Field(None, max_length=200)

    @field_validator("name", "qty", "price", "billing")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field may not be null")
        return value


class ProductOut(BaseModel):
    """Товар с производным полем rakam = billing × price."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    sub_category_id: int
    sub_category: SubCategoryRef
    qty: float
    price: float
    billing: float
    rakam: float
    image: str
    sample_location: str
    ghoda_location: str
    created_at: datetime
    updated_at: datetime


class ProductPage(BaseModel):
    items: List[ProductOut]
    meta: PageMeta
