"""
Admin Inventory Routes for Casa Nala
====================================

Endpoints:
----------
- GET /admin/inventory: List items by name, flagging low stock
- POST /admin/inventory: Add an item
- PATCH /admin/inventory/{id}/stock: Set the stock level
- DELETE /admin/inventory/{id}: Remove an item

Authentication:
---------------
All endpoints require an admin session.

Stock is tracked by hand. Placing an order does not decrement it.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..auth import SessionContext, require_admin
from ..db import get_db
from ..models import InventoryItem
from ..schemas.inventory import InventoryItemCreate, InventoryItemOut, StockUpdate


logger = logging.getLogger(__name__)

admin_inventory_router = APIRouter(prefix="/admin/inventory", tags=["Admin - Inventory"])


@admin_inventory_router.get("", response_model=List[InventoryItemOut])
def list_inventory(
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_admin),
) -> List[InventoryItemOut]:
    items = db.query(InventoryItem).order_by(InventoryItem.name.asc()).all()
    return [InventoryItemOut.from_item(i) for i in items]


@admin_inventory_router.post("", response_model=InventoryItemOut, status_code=201)
def add_inventory_item(
    payload: InventoryItemCreate,
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_admin),
) -> InventoryItemOut:
    item = InventoryItem(**payload.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("Added inventory item: %s (id=%d)", item.name, item.id)
    return InventoryItemOut.from_item(item)


@admin_inventory_router.patch("/{item_id}/stock", response_model=InventoryItemOut)
def update_stock(
    item_id: int,
    payload: StockUpdate,
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_admin),
) -> InventoryItemOut:
    item = db.get(InventoryItem, item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Item de inventario no encontrado.")
    item.stock = payload.stock
    db.commit()
    db.refresh(item)
    logger.info("Stock for %s set to %s %s", item.name, item.stock, item.unit)
    return InventoryItemOut.from_item(item)


@admin_inventory_router.delete("/{item_id}", status_code=204)
def delete_inventory_item(
    item_id: int,
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_admin),
) -> None:
    item = db.get(InventoryItem, item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Item de inventario no encontrado.")
    db.delete(item)
    db.commit()
    return None
