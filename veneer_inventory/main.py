"""
Главный модуль FastAPI приложения Veneer Inventory API.

Содержит конфигурацию приложения, логирование, middleware,
обработчики ошибок и роутеры.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from veneer_inventory.api.v1.routers import PROTECTED_PREFIXES, api_router
from veneer_inventory.core.auth import authenticate_request
from veneer_inventory.core.config import settings
from veneer_inventory.core.errors import InventoryError, StoreError, Unauthorized, ValidationError
from veneer_inventory.services.storage_service import LocalStorageProvider, storage_service

# Настройка логирования
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Создание экземпляра FastAPI приложения
app = FastAPI(
    title="Veneer Inventory API",
    description="API складского учета шпона: категории, подкатегории и товары",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Раздача локально сохраненных изображений
if isinstance(storage_service, LocalStorageProvider):
    app.mount(
        "/static", StaticFiles(directory=str(storage_service.base_path)), name="static"
    )
    logger.info("Static files mounted at /static from %s", storage_service.base_path)


# Настройка CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    """Перевод доменной ошибки в JSON ответ с полем kind."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    else:
        logger.warning(
            "%s %s rejected (%s): %s", request.method, request.url.path, exc.kind, exc.detail
        )
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


def _is_protected(path: str) -> bool:
    for prefix in PROTECTED_PREFIXES:
        full = API_PREFIX + prefix
        if path == full or path.startswith(full + "/"):
            return True
    return False


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Ошибки валидации запроса с детализацией по полям."""
    if _is_protected(request.url.path):
        # Токен проверяется раньше содержимого запроса
        try:
            await authenticate_request(request)
        except Unauthorized as auth_error:
            return await inventory_error_handler(request, auth_error)

    errors = []
    for error in exc.errors():
        # loc: ("body", "name") / ("query", "page") / ("path", "category_id")
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body",)]
        errors.append({"field": ".".join(loc) or "body", "message": error.get("msg", "")})
    return await inventory_error_handler(
        request, ValidationError("Validation failed", errors=errors)
    )


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Unhandled database error", exc_info=exc)
    return await inventory_error_handler(request, StoreError("Database error"))


@app.get("/healthz")
def healthz():
    """
    Health check endpoint для мониторинга состояния приложения.

    Returns:
        dict: Статус приложения
    """
    return {"status": "ok", "service": "Veneer Inventory API", "version": "1.0.0"}


# Подключение API роутеров
app.include_router(api_router, prefix=API_PREFIX)
