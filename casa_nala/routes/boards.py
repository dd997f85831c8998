"""
Staff Board Routes for Casa Nala
================================

Role-scoped order boards.

Endpoints:
----------
- GET /admin/kitchen: Pending and preparing orders in two columns (admin, cocina)
- POST /admin/kitchen/{id}/start: pendiente -> preparando (admin, cocina)
- POST /admin/kitchen/{id}/ready: preparando -> listo_recoger / en_camino (admin, cocina)
- GET /admin/delivery: All delivery orders (admin, mesero)
- GET /admin/pickup: Open pickup orders (admin, mesero)

Boards are served from the view cache and reload after any order write.
Status changes from the delivery and pickup boards go through
PATCH /admin/orders/{id}/status, restricted to each order's next_statuses.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..auth import SessionContext, require_floor, require_kitchen
from ..db import get_db
from ..schemas.orders import KitchenBoardOut, OrderViewOut, StatusUpdateResponse
from ..services.orders import OrderStoreError, mark_ready, start_preparing
from ..services.views import delivery_view, kitchen_view, pickup_view
from .admin_orders import status_update_response


logger = logging.getLogger(__name__)

boards_router = APIRouter(prefix="/admin", tags=["Admin - Boards"])


@boards_router.get("/kitchen", response_model=KitchenBoardOut)
def kitchen_board(
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_kitchen),
) -> KitchenBoardOut:
    try:
        return kitchen_view(db)
    except OrderStoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))


@boards_router.post("/kitchen/{order_id}/start", response_model=StatusUpdateResponse)
def kitchen_start(
    order_id: str,
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_kitchen),
):
    return status_update_response(start_preparing(db, order_id))


@boards_router.post("/kitchen/{order_id}/ready", response_model=StatusUpdateResponse)
def kitchen_ready(
    order_id: str,
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_kitchen),
):
    return status_update_response(mark_ready(db, order_id))


@boards_router.get("/delivery", response_model=List[OrderViewOut])
def delivery_board(
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_floor),
) -> List[OrderViewOut]:
    try:
        return delivery_view(db)
    except OrderStoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))


@boards_router.get("/pickup", response_model=List[OrderViewOut])
def pickup_board(
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_floor),
) -> List[OrderViewOut]:
    try:
        return pickup_view(db)
    except OrderStoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
