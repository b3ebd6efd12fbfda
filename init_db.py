#!/usr/bin/env python3
"""
Скрипт для инициализации базы данных
"""

import logging
import sys
from pathlib import Path

# Добавляем путь к пакету veneer_inventory
sys.path.insert(0, str(Path(__file__).parent))

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from veneer_inventory.db.database import engine
from veneer_inventory.db.models import Base

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("init_db")


def init_database() -> bool:
    """Создает все таблицы в базе данных."""
    logger.info("Initializing database at %s", engine.url.render_as_string(hide_password=True))

    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        logger.error("Failed to create tables: %s", e)
        return False

    tables = inspect(engine).get_table_names()
    logger.info("Tables: %s", ", ".join(tables))
    return True


if __name__ == "__main__":
    if not init_database():
        sys.exit(1)
