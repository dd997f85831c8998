"""
Admin Orders Routes for Casa Nala
=================================

Staff endpoints for listing orders and moving them through the lifecycle.

Endpoints:
----------
- GET /admin/orders: List orders filtered by status set and/or type
- GET /admin/orders/{id}: Get one order
- PATCH /admin/orders/{id}/status: Move an order to another status
- POST /admin/orders/{id}/cancel: Cancel an order

Authentication:
---------------
All endpoints require a staff session (admin, cocina or mesero). See
auth.RoleGuard.

Filtering:
----------
- ?status=pendiente&status=preparando - Any of the given statuses
- ?type=domicilio - Only delivery orders
- No parameters - All orders, newest first

There is no pagination; a single restaurant's order volume is small.

Status Changes:
---------------
Only moves allowed by the transition table succeed. The response body is
always ``{success, message, code}`` and the HTTP status follows ``code``:

    ok                  -> 200
    invalid_request     -> 400
    not_found           -> 404
    invalid_transition  -> 409
    store_error         -> 503

Usage:
------
    PATCH /admin/orders/3f2a.../status
    {"status": "preparando"}
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..auth import SessionContext, require_staff
from ..db import get_db
from ..enums import OrderStatus, OrderType, StatusUpdateCode
from ..schemas.orders import OrderViewOut, StatusUpdateRequest, StatusUpdateResponse
from ..services.orders import (
    OrderNotFoundError,
    OrderStoreError,
    StatusUpdateResult,
    cancel_order,
    get_order,
    get_orders,
    update_order_status,
)
from ..services.views import to_view


logger = logging.getLogger(__name__)

# Router definition
admin_orders_router = APIRouter(prefix="/admin/orders", tags=["Admin - Orders"])

_HTTP_STATUS_BY_CODE = {
    StatusUpdateCode.OK: 200,
    StatusUpdateCode.INVALID_REQUEST: 400,
    StatusUpdateCode.NOT_FOUND: 404,
    StatusUpdateCode.INVALID_TRANSITION: 409,
    StatusUpdateCode.STORE_ERROR: 503,
}


def status_update_response(result: StatusUpdateResult) -> JSONResponse:
    """Render a StatusUpdateResult with the HTTP status matching its code."""
    body = StatusUpdateResponse(success=result.success, message=result.message, code=result.code)
    return JSONResponse(
        status_code=_HTTP_STATUS_BY_CODE.get(result.code, 500),
        content=body.model_dump(mode="json"),
    )


# =============================================================================
# Order Endpoints
# =============================================================================

@admin_orders_router.get("", response_model=List[OrderViewOut])
def list_orders(
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_staff),
    status: Optional[List[OrderStatus]] = Query(None, description="Repeat to filter by several statuses"),
    type: Optional[OrderType] = Query(None, description="recoger or domicilio"),
) -> List[OrderViewOut]:
    """Return matching orders, newest first."""
    try:
        orders = get_orders(db, statuses=status, order_type=type)
    except OrderStoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return [to_view(o) for o in orders]


@admin_orders_router.get("/{order_id}", response_model=OrderViewOut)
def get_order_detail(
    order_id: str,
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_staff),
) -> OrderViewOut:
    try:
        order = get_order(db, order_id)
    except OrderNotFoundError:
        raise HTTPException(status_code=404, detail="Pedido no encontrado.")
    except OrderStoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return to_view(order)


@admin_orders_router.patch("/{order_id}/status", response_model=StatusUpdateResponse)
def change_order_status(
    order_id: str,
    payload: StatusUpdateRequest,
    db: Session = Depends(get_db),
    ctx: SessionContext = Depends(require_staff),
):
    """Move an order to a new status if the transition is allowed."""
    result = update_order_status(db, order_id, payload.status)
    if result.success:
        logger.info("Order %s set to %s by %s", order_id, payload.status.value, ctx.role.value)
    return status_update_response(result)


@admin_orders_router.post("/{order_id}/cancel", response_model=StatusUpdateResponse)
def cancel(
    order_id: str,
    db: Session = Depends(get_db),
    _ctx: SessionContext = Depends(require_staff),
):
    return status_update_response(cancel_order(db, order_id))
