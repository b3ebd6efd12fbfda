"""
Сервис товаров.

CRUD товаров, пагинированный поиск и загрузка изображений.
Поле rakam вычисляется при сериализации и никогда не сохраняется.
"""

import logging
from datetime import datetime
from io import BytesIO
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from veneer_inventory.core.errors import NotFound, StoreError
from veneer_inventory.db.database import commit
from veneer_inventory.db.models import Product, SubCategory
from veneer_inventory.schemas.pagination import PageMeta
from veneer_inventory.schemas.product import ProductCreate, ProductOut, ProductPage, ProductUpdate
from veneer_inventory.services import query_engine
from veneer_inventory.services.image_service import image_service
from veneer_inventory.services.storage_service import release_images, storage_service

logger = logging.getLogger(__name__)


def release_unreferenced_images(db: Session, images: Iterable[str]) -> int:
    """
    Удалить из хранилища файлы, на которые не ссылается ни один товар.

    Вызывается после фиксации транзакции, удалившей или изменившей товары.
    """
    candidates = {image for image in images if storage_service.path_from_url(image)}
    if not candidates:
        return 0
    in_use = set(db.scalars(select(Product.image).where(Product.image.in_(candidates))).all())
    return release_images(candidates - in_use)


class ProductService:
    """Операции над товарами."""

    def _get_or_404(self, db: Session, product_id: int) -> Product:
        product = db.get(Product, product_id)
        if product is None:
            raise NotFound("Product not found")
        return product

    def to_out(self, product: Product) -> ProductOut:
        return ProductOut.model_validate(product)

    def list_products(
        self,
        db: Session,
        filters: query_engine.ProductFilter,
        page: int = query_engine.DEFAULT_PAGE,
        limit: int = query_engine.DEFAULT_LIMIT,
    ) -> ProductPage:
        result = query_engine.search_products(db, filters, page=page, limit=limit)
        return ProductPage(
            items=[self.to_out(p) for p in result.items],
            meta=PageMeta.create(page=result.page, limit=result.limit, total=result.total),
        )

    def get_product(self, db: Session, product_id: int) -> ProductOut:
        return self.to_out(self._get_or_404(db, product_id))

    def create_product(self, db: Session, data: ProductCreate) -> ProductOut:
        if db.get(SubCategory, data.sub_category_id) is None:
            raise NotFound("SubCategory not found")

        now = datetime.utcnow()
        product = Product(
            name=data.name,
            sub_category_id=data.sub_category_id,
            qty=data.qty,
            price=data.price,
            billing=data.billing,
            image=data.image or "",
            sample_location=data.sample_location or "",
            ghoda_location=data.ghoda_location or "",
            created_at=now,
            updated_at=now,
        )
        db.add(product)
        commit(db)
        db.refresh(product)

        logger.info("Created product %s '%s'", product.id, product.name)
        return self.to_out(product)

    def update_product(self, db: Session, product_id: int, data: ProductUpdate) -> ProductOut:
        """
        Частичное обновление: меняются только переданные поля.

        updated_at обновляется при любом вызове, даже с пустым телом.
        """
        product = self._get_or_404(db, product_id)
        previous_image = product.image

        update_data = data.model_dump(exclude_unset=True)
        for field in ("image", "sample_location", "ghoda_location"):
            if field in update_data and update_data[field] is None:
                update_data[field] = ""
        for field, value in update_data.items():
            setattr(product, field, value)

        product.updated_at = datetime.utcnow()
        commit(db)
        db.refresh(product)

        if product.image != previous_image:
            release_unreferenced_images(db, [previous_image])
        return self.to_out(product)

    def delete_product(self, db: Session, product_id: int) -> None:
        product = self._get_or_404(db, product_id)
        image = product.image
        db.delete(product)
        commit(db)
        release_unreferenced_images(db, [image])
        logger.info("Deleted product %s", product_id)

    def upload_image(
        self,
        db: Session,
        product_id: int,
        filename: Optional[str],
        data: bytes,
    ) -> ProductOut:
        """
        Сохранить файл изображения в хранилище и привязать его к товару.

        Raises:
            NotFound: Товар не существует
            ValidationError: Файл не прошел проверку
            StoreError: Хранилище не приняло файл
        """
        product = self._get_or_404(db, product_id)
        filename = filename or ""
        mime_type = image_service.validate_upload(filename, data)

        storage_path = image_service.generate_path(product.id, filename)
        if not storage_service.save_file(storage_path, BytesIO(data), mime_type):
            raise StoreError("Failed to save file to storage")

        previous_image = product.image
        product.image = storage_service.get_file_url(storage_path)
        product.updated_at = datetime.utcnow()
        commit(db)
        db.refresh(product)
        release_unreferenced_images(db, [previous_image])

        logger.info("Attached image %s to product %s", storage_path, product.id)
        return self.to_out(product)


product_service = ProductService()
