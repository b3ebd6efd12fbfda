"""
Модуль аутентификации и авторизации.

Содержит функции для работы с JWT токенами, хеширования паролей,
проверки токена перед любой операцией с инвентарем и проверки
кода подтверждения удаления.
"""

import hmac
import logging
from datetime import datetime, timedelta
from typing import Optional

import jwt
from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from veneer_inventory.core.config import settings
from veneer_inventory.core.errors import Forbidden, Unauthorized
from veneer_inventory.db.database import get_db
from veneer_inventory.db.models import User

logger = logging.getLogger(__name__)

# Настройка хеширования паролей
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# HTTP Bearer схема; отсутствие заголовка обрабатываем сами
security = HTTPBearer(auto_error=False)


class AuthService:
    """Сервис для работы с аутентификацией."""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Проверка пароля."""
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Хеширование пароля."""
        return pwd_context.hash(password)

    @staticmethod
    def token_lifetime() -> timedelta:
        return timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)

    @staticmethod
    def create_access_token(
        data: dict, expires_delta: Optional[timedelta] = None
    ) -> str:
        """Создание JWT токена (по умолчанию на 30 дней)."""
        to_encode = data.copy()
        now = datetime.utcnow()
        expire = now + (expires_delta if expires_delta is not None else AuthService.token_lifetime())

        to_encode.update({"exp": expire, "iat": now})
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def verify_token(token: str) -> Optional[dict]:
        """Проверка подписи и срока действия JWT токена."""
        try:
            return jwt.decode(
                token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired token")
            return None
        except jwt.PyJWTError:
            return None


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Получение текущего пользователя из токена.

    Raises:
        Unauthorized: Токен отсутствует, поврежден, просрочен или
            принадлежит неизвестному/неактивному пользователю
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Not authorized, no token")

    payload = AuthService.verify_token(credentials.credentials)
    if payload is None:
        raise Unauthorized("Not authorized, token failed")

    user_id = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise Unauthorized("Not authorized, token failed")

    user = db.get(User, int(user_id))
    if user is None or not user.is_active:
        raise Unauthorized("Not authorized, user not found")

    return user


async def authenticate_request(request: Request) -> User:
    """
    Проверка токена вне цепочки зависимостей маршрута.

    FastAPI разбирает тело запроса до зависимостей роутера, поэтому
    обработчик ошибок валидации вызывает эту проверку сам: запрос без
    валидного токена получает 401, а не 400.

    Raises:
        Unauthorized: См. get_current_user
    """
    credentials = await security(request)
    db_factory = request.app.dependency_overrides.get(get_db, get_db)
    sessions = db_factory()
    db = next(sessions)
    try:
        return get_current_user(credentials, db)
    finally:
        sessions.close()


def require_delete_passcode(
    x_delete_passcode: Optional[str] = Header(None, alias="X-Delete-Passcode"),
) -> None:
    """
    Проверка кода подтверждения удаления.

    Если DELETE_PASSCODE не задан в настройках, проверка отключена.
    """
    expected = settings.DELETE_PASSCODE
    if not expected:
        return
    if x_delete_passcode is None or not hmac.compare_digest(
        x_delete_passcode.encode(), expected.encode()
    ):
        raise Forbidden("Incorrect passcode")


# Экспорт сервиса
auth_service = AuthService()
