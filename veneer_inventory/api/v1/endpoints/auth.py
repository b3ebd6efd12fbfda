"""
API endpoints выдачи и проверки токенов.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from veneer_inventory.core.auth import auth_service, get_current_user
from veneer_inventory.core.errors import Unauthorized
from veneer_inventory.db.database import commit, get_db
from veneer_inventory.db.models import User
from veneer_inventory.schemas.auth import LoginRequest, LoginResponse, VerifyResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    """
    Вход оператора.

    Args:
        login_data: Данные для входа (username, password)
        db: Сессия базы данных

    Returns:
        JWT токен на 30 дней и информация о пользователе

    Raises:
        Unauthorized: При неверных учетных данных
    """
    user = db.scalar(select(User).where(User.username == login_data.username))

    if (
        user is None
        or not user.is_active
        or not auth_service.verify_password(login_data.password, user.hashed_password)
    ):
        logger.warning("Failed login for username %s", login_data.username)
        raise Unauthorized("Invalid credentials")

    # Обновляем время последнего входа
    user.last_login = datetime.utcnow()
    commit(db)

    access_token = auth_service.create_access_token(data={"sub": str(user.id)})
    return LoginResponse(
        id=user.id,
        username=user.username,
        access_token=access_token,
        expires_in=int(auth_service.token_lifetime().total_seconds()),
    )


@router.get("/verify", response_model=VerifyResponse)
def verify(current_user: User = Depends(get_current_user)):
    """Проверка токена; возвращает владельца."""
    return VerifyResponse(id=current_user.id, username=current_user.username)
