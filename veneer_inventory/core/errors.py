"""
Доменные исключения инвентаря.

Каждое исключение несет машинно-проверяемый ``kind`` и HTTP статус,
в который его переводит обработчик в ``main.py``.
"""

from typing import Any, Dict, List, Optional


class InventoryError(Exception):
    """Базовое исключение приложения."""

    kind = "error"
    status_code = 500

    def __init__(self, detail: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(detail)
        self.detail = detail
        self.errors = errors

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"kind": self.kind, "detail": self.detail}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(InventoryError):
    """Некорректное или отсутствующее поле запроса."""

    kind = "validation_error"
    status_code = 400

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, errors=[{"field": field, "message": message}])


class NotFound(InventoryError):
    kind = "not_found"
    status_code = 404


class Conflict(InventoryError):
    """Нарушение уникальности имени."""

    kind = "conflict"
    status_code = 409


class Unauthorized(InventoryError):
    kind = "unauthorized"
    status_code = 401


class Forbidden(InventoryError):
    kind = "forbidden"
    status_code = 403


class StoreError(InventoryError):
    """Сбой хранилища (соединение, непроверенное ограничение)."""

    kind = "store_error"
    status_code = 500
