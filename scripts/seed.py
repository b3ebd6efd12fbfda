#!/usr/bin/env python3
"""
Заполнение базы демонстрационными данными склада.

Очищает категории, подкатегории и товары, затем создает
пять пород шпона с подкатегориями и товарами.
"""

import logging
import sys
from pathlib import Path

# Добавляем путь к пакету veneer_inventory
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from veneer_inventory.db.database import SessionLocal, engine
from veneer_inventory.db.models import Base, Category, Product, SubCategory

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("seed")

# (name, qty, price, billing, sample_location, ghoda_location)
SAMPLE_DATA = {
    "Teak": {
        "Teak Quarter": [
            ("TQ-001 Premium", 50, 150, 100, "A1", "G1"),
            ("TQ-002 Standard", 25, 120, 80, "A2", "G1"),
            ("TQ-003 Economy", 75, 90, 60, "A3", "G2"),
        ],
        "Teak Crown": [
            ("TC-001 Premium", 30, 180, 120, "B1", "G2"),
            ("TC-002 Standard", 15, 140, 90, "B2", "G3"),
        ],
        "Teak Burr": [
            ("TB-001 Exotic", 8, 350, 200, "C1", "G3"),
        ],
    },
    "Rosewood": {
        "Rosewood Quarter": [
            ("RQ-001 Premium", 20, 250, 150, "D1", "G4"),
            ("RQ-002 Standard", 45, 200, 120, "D2", "G4"),
        ],
        "Rosewood Crown": [
            ("RC-001 Premium", 12, 280, 180, "E1", "G5"),
        ],
    },
    "Oak": {
        "Oak Quarter": [
            ("OQ-001 Select", 60, 100, 70, "F1", "G5"),
            ("OQ-002 Standard", 100, 80, 55, "F2", "G6"),
        ],
        "Oak Crown": [
            ("OC-001 Premium", 35, 120, 85, "G1", "G6"),
        ],
        "Oak Figured": [
            ("OF-001 Exotic", 5, 300, 180, "H1", "G7"),
        ],
    },
    "Walnut": {
        "Walnut Quarter": [
            ("WQ-001 Premium", 40, 160, 100, "I1", "G7"),
            ("WQ-002 Standard", 55, 130, 85, "I2", "G8"),
        ],
        "Walnut Crown": [
            ("WC-001 Select", 22, 190, 120, "J1", "G8"),
        ],
    },
    "Maple": {
        "Maple Quarter": [
            ("MQ-001 Premium", 70, 110, 75, "K1", "G9"),
        ],
        "Maple Birdseye": [
            ("MB-001 Exotic", 3, 400, 250, "L1", "G9"),
            ("MB-002 Select", 10, 320, 200, "L2", "G10"),
        ],
    },
}


def seed() -> bool:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # Очистка в порядке зависимостей
        db.execute(delete(Product))
        db.execute(delete(SubCategory))
        db.execute(delete(Category))

        products = 0
        for category_name, sub_categories in SAMPLE_DATA.items():
            category = Category(name=category_name)
            db.add(category)
            db.flush()
            for sub_name, rows in sub_categories.items():
                sub_category = SubCategory(name=sub_name, category_id=category.id)
                db.add(sub_category)
                db.flush()
                for name, qty, price, billing, sample, ghoda in rows:
                    db.add(Product(
                        name=name,
                        sub_category_id=sub_category.id,
                        qty=qty,
                        price=price,
                        billing=billing,
                        sample_location=sample,
                        ghoda_location=ghoda,
                    ))
                    products += 1

        db.commit()
        logger.info("Seeded %s categories and %s products", len(SAMPLE_DATA), products)
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Seed failed: %s", e)
        return False
    finally:
        db.close()


if __name__ == "__main__":
    if not seed():
        sys.exit(1)
