"""
Waitstaff Routes for Casa Nala
==============================

Endpoints:
----------
- GET /mesero/tables: Dining-room tables waitstaff can take orders for
- POST /mesero/orders: Send a table's order to the kitchen

Table orders are pickup ("recoger") orders under the name "Mesa <table>",
priced from the stored menu. Requires an admin or mesero session.

Usage:
------
    POST /mesero/orders
    {"table": "4", "items": [{"menu_item_id": 2, "quantity": 3}]}
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from .. import config
from ..auth import SessionContext, require_floor
from ..db import get_db
from ..schemas.orders import CreateOrderResponse, TableOrderRequest
from ..services.orders import create_table_order


logger = logging.getLogger(__name__)

mesero_router = APIRouter(prefix="/mesero", tags=["Waitstaff"])


@mesero_router.get("/tables", response_model=List[str])
def list_tables(_ctx: SessionContext = Depends(require_floor)) -> List[str]:
    return list(config.DINING_TABLES)


@mesero_router.post("/orders", response_model=CreateOrderResponse, status_code=201)
def submit_table_order(
    payload: TableOrderRequest,
    db: Session = Depends(get_db),
    ctx: SessionContext = Depends(require_floor),
):
    result = create_table_order(
        db, payload.table, [(line.menu_item_id, line.quantity) for line in payload.items]
    )
    body = CreateOrderResponse(
        success=result.success,
        message=result.message,
        order_id=result.order_id,
        errors=result.errors,
    ).model_dump()
    if result.success:
        logger.info("Table %s order %s sent by %s", payload.table, result.order_id, ctx.user_id)
        return JSONResponse(status_code=201, content=body)
    return JSONResponse(status_code=422 if result.errors else 503, content=body)
