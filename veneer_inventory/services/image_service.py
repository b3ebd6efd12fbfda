"""
Сервис для работы с изображениями товаров.

Обеспечивает валидацию ссылок на изображения (URL, пути в хранилище,
data URL) и загружаемых файлов, а также генерацию путей хранения.
"""

import base64
import binascii
import hashlib
import mimetypes
import re
import uuid
from io import BytesIO
from pathlib import Path
from urllib.parse import urlparse

from PIL import Image, UnidentifiedImageError

from veneer_inventory.core.config import settings
from veneer_inventory.core.errors import ValidationError

DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)


class ImageService:
    """
    Сервис для работы с изображениями товаров.

    Обеспечивает:
    - Проверку ссылок на изображения, сохраняемых в поле Product.image
    - Валидацию загружаемых файлов
    - Генерацию путей для хранилища
    """

    # Поддерживаемые форматы
    SUPPORTED_FORMATS = {'.jpg', '.jpeg', '.png', '.webp', '.gif'}
    SUPPORTED_MIME_TYPES = {
        'image/jpeg', 'image/jpg', 'image/png',
        'image/webp', 'image/gif'
    }

    @property
    def max_file_size(self) -> int:
        return settings.MAX_IMAGE_SIZE

    def validate_reference(self, value: str) -> None:
        """
        Проверка значения поля image.

        Допускаются http(s) URL, абсолютные пути (/static/...) и
        data URL с base64 содержимым поддерживаемого типа.

        Raises:
            ValueError: Если значение не является допустимой ссылкой
        """
        match = DATA_URL_RE.match(value)
        if match:
            mime_type = match.group("mime").lower()
            if mime_type not in self.SUPPORTED_MIME_TYPES:
                raise ValueError(f"Unsupported image type: {mime_type}")
            try:
                decoded = base64.b64decode(match.group("payload"), validate=True)
            except (binascii.Error, ValueError):
                raise ValueError("Image data is not valid base64")
            if len(decoded) > self.max_file_size:
                raise ValueError(
                    f"Image size exceeds maximum allowed size of {self.max_file_size} bytes"
                )
            return

        if value.startswith("/"):
            if not value.startswith("/static/") or len(value) == len("/static/"):
                raise ValueError("Image path must point into /static/")
            return

        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Image must be an http(s) URL, a /static path or a data URL")

    def validate_upload(self, filename: str, data: bytes) -> str:
        """
        Валидация загруженного файла.

        Args:
            filename: Оригинальное имя файла
            data: Содержимое файла

        Returns:
            str: MIME тип файла

        Raises:
            ValidationError: Если файл слишком большой, неподдерживаемого
                формата или не является изображением
        """
        if not data:
            raise ValidationError.for_field("file", "File is empty")

        # Проверка размера файла
        if len(data) > self.max_file_size:
            raise ValidationError.for_field(
                "file",
                f"File size exceeds maximum allowed size of {self.max_file_size} bytes",
            )

        # Проверка расширения файла
        file_ext = Path(filename or "").suffix.lower()
        if file_ext not in self.SUPPORTED_FORMATS:
            raise ValidationError.for_field(
                "file",
                f"Unsupported file format: {file_ext or 'none'}. "
                f"Supported: {', '.join(sorted(self.SUPPORTED_FORMATS))}",
            )

        mime_type, _ = mimetypes.guess_type(filename)
        if mime_type not in self.SUPPORTED_MIME_TYPES:
            raise ValidationError.for_field("file", f"Unsupported MIME type: {mime_type}")

        # Проверка, что содержимое действительно изображение
        try:
            with Image.open(BytesIO(data)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError):
            raise ValidationError.for_field("file", "File is not a valid image")

        return mime_type

    def generate_path(self, product_id: int, filename: str) -> str:
        """
        Генерация пути для сохранения изображения.

        Структура: products/{hash}/{product_id}/{uuid}{ext}
        """
        # Хеш от product_id для распределения по папкам
        hash_value = hashlib.md5(str(product_id).encode()).hexdigest()[:8]
        ext = Path(filename).suffix.lower()
        return f"products/{hash_value}/{product_id}/{uuid.uuid4().hex}{ext}"


# Глобальный экземпляр сервиса
image_service = ImageService()
