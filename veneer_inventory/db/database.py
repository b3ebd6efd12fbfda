"""
Конфигурация базы данных.

Содержит настройки подключения, фабрику сессий и помощник фиксации
транзакций.
"""

import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from veneer_inventory.core.config import settings
from veneer_inventory.core.errors import StoreError

logger = logging.getLogger(__name__)

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # SQLite-соединение используется из потоков threadpool FastAPI
    connect_args["check_same_thread"] = False

# Создание движка SQLAlchemy
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Проверка соединения перед использованием
    future=True,
    echo=bool(settings.DEBUG),  # Логирование SQL запросов в режиме отладки
    connect_args=connect_args,
)


# Фабрика сессий базы данных
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    future=True
)


def get_db() -> Generator:
    """
    Dependency для получения сессии базы данных.

    Yields:
        Session: Сессия SQLAlchemy

    Note:
        Автоматически закрывает сессию после использования,
        незафиксированная транзакция при этом откатывается.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit(db: Session) -> None:
    """
    Зафиксировать текущую транзакцию сессии.

    Raises:
        StoreError: Если хранилище отклонило запись; транзакция откатывается
    """
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Commit failed, transaction rolled back")
        raise StoreError("Database error") from e
