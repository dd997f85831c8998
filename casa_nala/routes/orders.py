"""
Order Submission Routes for Casa Nala
=====================================

Customer-facing endpoints that create orders. No authentication required.

Endpoints:
----------
- POST /orders: Create an order from a full payload (items with prices).
  Lines that reference a stored menu item must carry its current price.
- POST /checkout: Create an order from a cart of menu item ids, priced
  against the stored menu

Both endpoints are rate limited (RATE_LIMIT_ORDERS) and answer validation
problems with 422 and a ``{success: false, message, errors}`` body where
``errors`` maps field paths to messages. Store failures answer 503 with a
generic message.

Usage:
------
    POST /orders
    {
        "items": [{"id": 1, "name": "Pozole Rojo", "unitPrice": 120, "quantity": 2}],
        "total": 240,
        "type": "recoger",
        "customer": {"name": "Ana", "phone": "3312345678"}
    }
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..config import get_rate_limit_orders
from ..db import get_db
from ..rate_limit import limiter
from ..schemas.checkout import CheckoutForm, CheckoutLineOut, CheckoutRequest, CheckoutResponse
from ..schemas.orders import CreateOrderResponse
from ..services.cart import Cart, submit_checkout
from ..services.orders import create_order


logger = logging.getLogger(__name__)

orders_router = APIRouter(tags=["Orders"])


@orders_router.post("/orders", response_model=CreateOrderResponse, status_code=201)
@limiter.limit(get_rate_limit_orders)
def submit_order(
    request: Request,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
):
    """
    Create an order with status "pendiente".

    The payload is validated by the lifecycle service so field errors come
    back in its own format instead of FastAPI's default 422 body.
    """
    result = create_order(db, payload)
    body = CreateOrderResponse(
        success=result.success,
        message=result.message,
        order_id=result.order_id,
        errors=result.errors,
    ).model_dump()
    if result.success:
        return JSONResponse(status_code=201, content=body)
    return JSONResponse(status_code=422 if result.errors else 503, content=body)


@orders_router.post("/checkout", response_model=CheckoutResponse, status_code=201)
@limiter.limit(get_rate_limit_orders)
def checkout(
    request: Request,
    payload: CheckoutRequest,
    db: Session = Depends(get_db),
):
    cart = Cart()
    for line in payload.items:
        cart.set_quantity(line.menu_item_id, cart.quantity(line.menu_item_id) + line.quantity)

    form = CheckoutForm(
        name=payload.customer.name,
        phone=payload.customer.phone,
        notes=payload.customer.notes,
        pickup_window=payload.pickup_window,
        order_type=payload.order_type,
        address=payload.address,
    )
    result = submit_checkout(db, cart, form)

    body = CheckoutResponse(
        success=result.success,
        message=result.message,
        order_id=result.order_id,
        errors=result.errors,
    )
    if result.summary is not None:
        body.lines = [
            CheckoutLineOut(
                menu_item_id=line.menu_item_id,
                name=line.name,
                unit_price=line.unit_price,
                quantity=line.quantity,
                line_total=line.line_total,
            )
            for line in result.summary.lines
        ]
        body.subtotal = result.summary.subtotal
        body.delivery_fee = result.summary.delivery_fee
        body.total = result.summary.total

    if result.success:
        return JSONResponse(status_code=201, content=body.model_dump())
    return JSONResponse(status_code=422 if result.errors else 503, content=body.model_dump())
