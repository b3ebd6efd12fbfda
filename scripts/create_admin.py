#!/usr/bin/env python3
"""
Скрипт для создания оператора склада в базе данных.

Если пользователь уже существует, его пароль сбрасывается.
"""

import argparse
import logging
import sys
from pathlib import Path

# Добавляем путь к пакету veneer_inventory
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from veneer_inventory.core.auth import AuthService
from veneer_inventory.db.database import SessionLocal
from veneer_inventory.db.models import User

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("create_admin")


def create_admin(username: str, password: str) -> bool:
    """Создает или обновляет оператора."""
    db = SessionLocal()
    try:
        user = db.scalar(select(User).where(User.username == username))
        hashed_password = AuthService.get_password_hash(password)

        if user:
            user.hashed_password = hashed_password
            user.is_active = True
            logger.info("User %s exists (id=%s), password reset", username, user.id)
        else:
            user = User(username=username, hashed_password=hashed_password, is_active=True)
            db.add(user)
            logger.info("Creating user %s", username)

        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to create user: %s", e)
        return False
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create or reset an inventory operator")
    parser.add_argument("--username", default="admin")
    parser.add_argument("--password", default="admin123")
    args = parser.parse_args()

    if len(args.username) < 3 or len(args.username) > 50:
        parser.error("username must be 3-50 characters")
    if len(args.password) < 6:
        parser.error("password must be at least 6 characters")

    if not create_admin(args.username, args.password):
        sys.exit(1)


if __name__ == "__main__":
    main()
