#!/usr/bin/env python3
"""
Проверка целостности иерархии.

Удаляет подкатегории без категории и товары без подкатегории.
Предназначен для периодического запуска (cron).
"""

import logging
import sys
from pathlib import Path

# Добавляем путь к пакету veneer_inventory
sys.path.insert(0, str(Path(__file__).parent.parent))

from veneer_inventory.core.errors import StoreError
from veneer_inventory.db.database import SessionLocal
from veneer_inventory.services.cascade import sweep_orphans

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("sweep_orphans")


def main() -> int:
    db = SessionLocal()
    try:
        result = sweep_orphans(db)
    except StoreError:
        return 1
    finally:
        db.close()

    logger.info(
        "Removed %s orphan sub-categories and %s orphan products",
        result.sub_categories, result.products,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
