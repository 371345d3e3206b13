#!/usr/bin/env python3
"""
Seed demo data - numbered tables and a starter menu.

Usage:
    python seed_demo_data.py                                # uses DATABASE_URL
    python seed_demo_data.py --database-url sqlite:///./tableside.db --tables 12

Tables and menu items are only added when the respective collection is empty,
so the script is safe to re-run.
"""

import argparse
import logging
import sys
from decimal import Decimal

from sqlalchemy.orm import sessionmaker

from tableside.core.config import settings
from tableside.db.base import Base
from tableside.db.session import build_engine
from tableside.models import MenuItem, Table
from tableside.services import MenuService, TableService
from tableside.store import SqlStore

logger = logging.getLogger("seed")

STARTER_MENU = [
    {"name": "Paneer Tikka", "category": "starters", "price": Decimal("220.00"), "is_vegetarian": True,
     "description": "Chargrilled cottage cheese with peppers", "preparation_time": 15},
    {"name": "Chilli Chicken", "category": "starters", "price": Decimal("260.00"), "is_spicy": True,
     "description": "Indo-Chinese wok-tossed chicken", "preparation_time": 15},
    {"name": "Butter Chicken", "category": "main-course", "price": Decimal("340.00"),
     "description": "Tandoori chicken in tomato butter gravy", "preparation_time": 20},
    {"name": "Dal Makhani", "category": "main-course", "price": Decimal("240.00"), "is_vegetarian": True,
     "description": "Slow-cooked black lentils", "preparation_time": 20},
    {"name": "Veg Biryani", "category": "main-course", "price": Decimal("280.00"), "is_vegetarian": True,
     "is_spicy": True, "description": "Basmati rice layered with vegetables", "preparation_time": 25},
    {"name": "Gulab Jamun", "category": "desserts", "price": Decimal("120.00"), "is_vegetarian": True,
     "description": "Two pieces, served warm", "preparation_time": 5},
    {"name": "Masala Chai", "category": "beverages", "price": Decimal("60.00"), "is_vegetarian": True,
     "description": "Spiced milk tea", "preparation_time": 5},
    {"name": "Fresh Lime Soda", "category": "drinks", "price": Decimal("80.00"), "is_vegetarian": True,
     "description": "Sweet or salted", "preparation_time": 5},
    {"name": "Masala Fries", "category": "snacks", "price": Decimal("140.00"), "is_vegetarian": True,
     "is_spicy": True, "description": "Fries tossed in chaat masala", "preparation_time": 10},
]


def seed(store: SqlStore, table_count: int, with_menu: bool) -> None:
    tables = TableService(store)
    if store.list(Table):
        logger.info("Tables already present, skipping")
    else:
        for number in range(1, table_count + 1):
            tables.add_table(number, seats=2 if number % 4 == 0 else 4)
        logger.info(f"Added {table_count} tables")

    if not with_menu:
        return
    menu = MenuService(store)
    if store.list(MenuItem):
        logger.info("Menu already present, skipping")
        return
    for item in STARTER_MENU:
        menu.create_item(**item)
    logger.info(f"Added {len(STARTER_MENU)} menu items")


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed Tableside demo data")
    parser.add_argument("--database-url", default=settings.database_url, help="Defaults to DATABASE_URL")
    parser.add_argument("--tables", type=int, default=10, help="Number of tables to create (default 10)")
    parser.add_argument("--no-menu", action="store_true", help="Only seed tables")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if not args.database_url:
        parser.error("no database configured: pass --database-url or set DATABASE_URL")
    if args.tables < 1:
        parser.error("--tables must be at least 1")

    engine = build_engine(args.database_url)
    Base.metadata.create_all(bind=engine)
    db = sessionmaker(bind=engine, autoflush=False)()
    try:
        seed(SqlStore(db), args.tables, with_menu=not args.no_menu)
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
