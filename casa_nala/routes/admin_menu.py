"""
Admin Menu Routes for Casa Nala
===============================

Admin endpoints for managing the dishes customers can order.

Endpoints:
----------
- GET /admin/menu: List all menu items (by category, then name)
- POST /admin/menu: Create a new menu item
- GET /admin/menu/{id}: Get a specific menu item
- PUT /admin/menu/{id}: Update a menu item
- DELETE /admin/menu/{id}: Delete a menu item

Authentication:
---------------
All endpoints require an admin session.

Existing orders keep the name and price captured at checkout, so editing or
deleting a dish never changes an order already placed.

Usage:
------
    POST /admin/menu
    {
        "name": "Tostada de Tinga",
        "description": "Tostada con tinga de pollo, crema y queso fresco.",
        "price": 52,
        "category": "Antojitos"
    }
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..auth import SessionContext, require_admin
from ..db import get_db
from ..models import MenuItem
from ..schemas.menu import MenuItemCreate, MenuItemOut, MenuItemUpdate


logger = logging.getLogger(__name__)

# Router definition
admin_menu_router = APIRouter(prefix="/admin/menu", tags=["Admin - Menu"])


def _get_or_404(db: Session, item_id: int) -> MenuItem:
    item = db.query(MenuItem).filter(MenuItem.id == item_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Platillo no encontrado.")
    return item


@admin_menu_router.get("", response_model=List[MenuItemOut])
def admin_menu(
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_admin),
) -> List[MenuItemOut]:
    items = db.query(MenuItem).order_by(MenuItem.category.asc(), MenuItem.name.asc()).all()
    return [MenuItemOut.model_validate(m) for m in items]


@admin_menu_router.post("", response_model=MenuItemOut, status_code=201)
def create_menu_item(
    payload: MenuItemCreate,
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_admin),
) -> MenuItemOut:
    item = MenuItem(
        name=payload.name,
        description=payload.description,
        price=payload.price,
        category=payload.category,
        image_url=payload.image_url,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("Created menu item: %s (id=%d)", item.name, item.id)
    return MenuItemOut.model_validate(item)


@admin_menu_router.get("/{item_id}", response_model=MenuItemOut)
def get_menu_item(
    item_id: int,
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_admin),
) -> MenuItemOut:
    return MenuItemOut.model_validate(_get_or_404(db, item_id))


@admin_menu_router.put("/{item_id}", response_model=MenuItemOut)
def update_menu_item(
    item_id: int,
    payload: MenuItemUpdate,
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_admin),
) -> MenuItemOut:
    item = _get_or_404(db, item_id)

    for field_name, value in payload.model_dump(exclude_unset=True).items():
        setattr(item, field_name, value)

    db.commit()
    db.refresh(item)
    logger.info("Updated menu item: %s (id=%d)", item.name, item.id)
    return MenuItemOut.model_validate(item)


@admin_menu_router.delete("/{item_id}", status_code=204)
def delete_menu_item(
    item_id: int,
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_admin),
) -> None:
    item = _get_or_404(db, item_id)
    logger.info("Deleting menu item: %s (id=%d)", item.name, item.id)
    db.delete(item)
    db.commit()
    return None
