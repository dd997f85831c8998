"""
Seed the demo menu, a starter inventory and the bootstrap admin.

    python -m casa_nala.seed

Each step is skipped when its table already has rows. The admin is created
only when ADMIN_PASSWORD is set.
"""

import logging

from sqlalchemy.orm import Session

from . import config
from .auth import create_user
from .db import SessionLocal, init_db
from .enums import Role
from .logging_config import setup_logging
from .models import InventoryItem, MenuItem, UserProfile

logger = logging.getLogger(__name__)

DEMO_MENU = [
    ("Pozole Rojo", "Platos Fuertes", 120, "Pozole de cerdo con chile guajillo, rábano y orégano."),
    ("Taco de Barbacoa", "Tacos", 55, "Barbacoa de res en tortilla de maíz hecha a mano."),
    ("Quesadilla de Flor de Calabaza", "Antojitos", 48, "Quesadilla de maíz con flor de calabaza y quesillo."),
    ("Tostada de Tinga", "Antojitos", 52, "Tinga de pollo, crema, lechuga y queso fresco."),
    ("Sopes de Chicharrón", "Antojitos", 42, "Sopes con chicharrón prensado y salsa verde."),
    ("Agua Fresca de Jamaica", "Bebidas", 32, "Agua de flor de jamaica endulzada con piloncillo."),
]

DEMO_INVENTORY = [
    ("Maíz pozolero", "kg", 12, 4, "Molino La Esperanza"),
    ("Tortilla de maíz", "paquete", 30, 10, None),
    ("Flor de jamaica", "kg", 3, 1, None),
    ("Queso fresco", "kg", 5, 2, None),
]


def seed_menu(db: Session) -> int:
    existing = db.query(MenuItem).count()
    if existing > 0:
        logger.info("Menu already has %d items. Not seeding again.", existing)
        return 0
    db.add_all([
        MenuItem(name=name, category=category, price=price, description=description)
        for name, category, price, description in DEMO_MENU
    ])
    db.commit()
    logger.info("Seeded %d menu items", len(DEMO_MENU))
    return len(DEMO_MENU)


def seed_inventory(db: Session) -> int:
    if db.query(InventoryItem).count() > 0:
        return 0
    db.add_all([
        InventoryItem(name=name, unit=unit, stock=stock, low_stock_threshold=threshold, supplier=supplier)
        for name, unit, stock, threshold, supplier in DEMO_INVENTORY
    ])
    db.commit()
    logger.info("Seeded %d inventory items", len(DEMO_INVENTORY))
    return len(DEMO_INVENTORY)


def seed_admin(db: Session) -> bool:
    if not config.ADMIN_PASSWORD:
        logger.warning("ADMIN_PASSWORD not set, skipping bootstrap admin")
        return False
    if db.query(UserProfile).filter(UserProfile.email == config.ADMIN_EMAIL.lower()).first():
        return False
    create_user(db, config.ADMIN_EMAIL, config.ADMIN_PASSWORD, role=Role.ADMIN, display_name="Administrador")
    return True


def main() -> None:
    setup_logging()
    init_db()
    db = SessionLocal()
    try:
        seed_menu(db)
        seed_inventory(db)
        seed_admin(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
