"""
Сервис для работы с хранилищами файлов.

Поддерживает локальное хранилище и Amazon S3 (или совместимые сервисы).
Обеспечивает единый интерфейс для работы с файлами
независимо от типа хранилища.
"""

import logging
import shutil
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Iterable, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from veneer_inventory.core.config import settings

logger = logging.getLogger(__name__)


class StorageProvider(ABC):
    """
    Абстрактный базовый класс для провайдеров хранилища.
    """

    @abstractmethod
    def save_file(
        self, file_path: str, file_data: BinaryIO, content_type: Optional[str] = None
    ) -> bool:
        pass

    @abstractmethod
    def get_file_url(self, file_path: str) -> str:
        pass

    @abstractmethod
    def delete_file(self, file_path: str) -> bool:
        pass

    @abstractmethod
    def file_exists(self, file_path: str) -> bool:
        pass

    def path_from_url(self, url: str) -> Optional[str]:
        """
        Путь файла в хранилище по его URL.

        Returns:
            Optional[str]: Путь (products/...), если URL выдан этим
                хранилищем, иначе None
        """
        prefix = self.get_file_url("")
        if not url or not url.startswith(prefix):
            return None
        file_path = url[len(prefix):]
        if not file_path.startswith("products/") or ".." in file_path.split("/"):
            return None
        return file_path


class LocalStorageProvider(StorageProvider):
    """
    Локальное хранилище файлов, раздается приложением под /static.
    """

    def __init__(self, base_path: Optional[str] = None):
        self.base_path = Path(base_path or settings.STORAGE_PATH)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def save_file(
        self, file_path: str, file_data: BinaryIO, content_type: Optional[str] = None
    ) -> bool:
        try:
            full_path = self.base_path / file_path
            full_path.parent.mkdir(parents=True, exist_ok=True)

            with open(full_path, "wb") as f:
                shutil.copyfileobj(file_data, f)

            logger.info("Saved file to %s", full_path)
            return True
        except OSError as e:
            logger.error("Error saving file %s: %s", file_path, e)
            return False

    def get_file_url(self, file_path: str) -> str:
        if settings.CDN_BASE_URL:
            return f"{settings.CDN_BASE_URL.rstrip('/')}/{file_path.lstrip('/')}"
        return f"/static/{file_path}"

    def delete_file(self, file_path: str) -> bool:
        full_path = self.base_path / file_path
        if not full_path.resolve().is_relative_to(self.base_path.resolve()):
            logger.warning("Refusing to delete %s outside storage", file_path)
            return False
        try:
            if full_path.exists():
                full_path.unlink()
                return True
            return False
        except OSError as e:
            logger.error("Error deleting file %s: %s", file_path, e)
            return False

    def file_exists(self, file_path: str) -> bool:
        return (self.base_path / file_path).exists()


class S3StorageProvider(StorageProvider):
    """
    Amazon S3 хранилище (или совместимые сервисы, например MinIO).
    """

    def __init__(self, bucket_name: str, region: Optional[str] = None, endpoint_url: Optional[str] = None):
        self.bucket_name = bucket_name
        self.region = region or "us-east-1"

        config = Config(
            retries={'max_attempts': 3, 'mode': 'adaptive'},
            connect_timeout=10,
            read_timeout=30,
            signature_version="s3v4",
            s3={'addressing_style': 'path'}
        )

        self.s3_client = boto3.client(
            "s3",
            region_name=self.region,
            endpoint_url=endpoint_url,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
            config=config,
        )

    def save_file(
        self, file_path: str, file_data: BinaryIO, content_type: Optional[str] = None
    ) -> bool:
        extra_args = {}
        if content_type:
            extra_args["ContentType"] = content_type

        # Читаем содержимое, чтобы указать ContentLength (важно для MinIO)
        file_data.seek(0)
        file_content = file_data.read()
        extra_args["ContentLength"] = len(file_content)

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=file_path,
                Body=BytesIO(file_content),
                **extra_args
            )
            logger.info("Uploaded %s to bucket %s", file_path, self.bucket_name)
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error("Error saving file %s to S3: %s", file_path, e)
            return False

    def get_file_url(self, file_path: str) -> str:
        if settings.CDN_BASE_URL:
            return f"{settings.CDN_BASE_URL.rstrip('/')}/{file_path.lstrip('/')}"
        endpoint = self.s3_client.meta.endpoint_url.rstrip("/")
        return f"{endpoint}/{self.bucket_name}/{file_path}"

    def delete_file(self, file_path: str) -> bool:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=file_path)
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error("Error deleting file %s from S3: %s", file_path, e)
            return False

    def file_exists(self, file_path: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=file_path)
            return True
        except ClientError:
            return False


def create_storage_provider() -> StorageProvider:
    """Создание провайдера по STORAGE_TYPE из настроек."""
    if settings.STORAGE_TYPE == "s3":
        logger.info("Using S3 storage, bucket %s", settings.S3_BUCKET_NAME)
        return S3StorageProvider(
            bucket_name=settings.S3_BUCKET_NAME,
            region=settings.AWS_REGION,
            endpoint_url=settings.S3_ENDPOINT_URL,
        )
    return LocalStorageProvider()


storage_service = create_storage_provider()


def release_images(images: Iterable[str]) -> int:
    """
    Удалить из хранилища файлы изображений, на которые больше не ссылаются товары.

    Внешние URL и data URL пропускаются.

    Returns:
        int: Количество удаленных файлов
    """
    removed = 0
    for image in images:
        file_path = storage_service.path_from_url(image)
        if file_path and storage_service.file_exists(file_path):
            if storage_service.delete_file(file_path):
                removed += 1
    if removed:
        logger.info("Released %s stored images", removed)
    return removed
