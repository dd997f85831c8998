"""
Order Schemas for Casa Nala
===========================

This module defines Pydantic models for order creation, status changes and
the order payloads returned to staff views.

Endpoint Coverage:
------------------
- POST /orders: Create an order from a checkout or waitstaff submission
- GET /admin/orders: List orders filtered by status set and/or type
- GET /admin/orders/{id}: Get one order
- PATCH /admin/orders/{id}/status: Move an order to another status
- GET /admin/kitchen, /admin/delivery, /admin/pickup: Role-scoped boards

Order Lifecycle:
----------------
    pendiente -> preparando -> listo_recoger -> completado   (recoger)
    pendiente -> preparando -> en_camino     -> completado   (domicilio)
    any non-terminal status -> cancelado

Input Field Names:
------------------
Line item prices are accepted as ``unitPrice``, ``unit_price`` or ``price``
so both the storefront and the waitstaff screen can submit their own shape.
Responses always use snake_case.
"""

from datetime import datetime
from typing import List, Optional, Union

import phonenumbers
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..config import PICKUP_WINDOWS
from ..enums import OrderStatus, OrderType, StatusUpdateCode

MIN_PHONE_DIGITS = 10


def count_phone_digits(phone: str) -> int:
    """Number of digits in a phone string, ignoring spaces and punctuation."""
    return len(phonenumbers.normalize_digits_only(phone or ""))


class OrderItemIn(BaseModel):
    """One requested line: a menu item reference, its price and quantity."""
    model_config = ConfigDict(populate_by_name=True)

    id: Union[int, str]
    name: str = Field(min_length=1)
    unit_price: float = Field(gt=0, validation_alias=AliasChoices("unitPrice", "unit_price", "price"))
    quantity: int = Field(ge=1)


class CustomerIn(BaseModel):
    """
    Customer contact block.

    ``address`` is optional at the schema level. The lifecycle service adds
    an explicit check that rejects "domicilio" orders without one.
    """
    name: str
    phone: str
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Se requiere el nombre del cliente.")
        return v

    @field_validator("phone")
    @classmethod
    def phone_has_enough_digits(cls, v: str) -> str:
        v = v.strip()
        if count_phone_digits(v) < MIN_PHONE_DIGITS:
            raise ValueError("Se requiere un teléfono válido (al menos 10 dígitos).")
        return v

    @field_validator("address", "notes")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class OrderCreate(BaseModel):
    """
    Request model for creating an order.

    Example:
        {
            "items": [{"id": 1, "name": "Pozole Rojo", "unitPrice": 120, "quantity": 2}],
            "total": 280,
            "type": "domicilio",
            "customer": {"name": "Ana", "phone": "3312345678", "address": "Av. Juárez 12"}
        }
    """
    items: List[OrderItemIn] = Field(min_length=1)
    total: float = Field(gt=0)
    type: OrderType
    customer: CustomerIn
    pickup_window: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("pickupWindow", "pickup_window", "horario")
    )

    @field_validator("pickup_window")
    @classmethod
    def known_window(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        if v not in PICKUP_WINDOWS:
            raise ValueError("Selecciona un horario válido.")
        return v


class OrderItemOut(BaseModel):
    """A persisted order line."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    unit_price: float
    quantity: int
    line_total: float


class CustomerOut(BaseModel):
    name: str
    phone: str
    address: Optional[str] = None
    notes: Optional[str] = None


class OrderOut(BaseModel):
    """
    Response model for an order.

    Attributes:
        id: Opaque identifier assigned on creation
        items: Lines in submission order
        subtotal: Sum of unit_price * quantity
        delivery_fee: Surcharge applied to "domicilio" orders
        total: subtotal + delivery_fee
        type: "recoger" or "domicilio"
        status: Current lifecycle status
        source: "web" for customer checkouts, "mesero" for table orders
        customer: Nested contact block
        pickup_window: Time window chosen at checkout, if any
        created_at / updated_at: Store-assigned timestamps
    """
    id: str
    items: List[OrderItemOut]
    subtotal: float
    delivery_fee: float
    total: float
    type: OrderType
    status: OrderStatus
    source: str
    customer: CustomerOut
    pickup_window: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_order(cls, order) -> "OrderOut":
        return cls(
            id=order.id,
            items=[
                OrderItemOut(
                    id=item.item_ref,
                    name=item.name,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    line_total=item.line_total,
                )
                for item in order.items
            ],
            subtotal=order.subtotal,
            delivery_fee=order.delivery_fee,
            total=order.total,
            type=order.order_type,
            status=order.status,
            source=order.source,
            customer=CustomerOut(
                name=order.customer_name,
                phone=order.customer_phone,
                address=order.customer_address,
                notes=order.customer_notes,
            ),
            pickup_window=order.pickup_window,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderViewOut(OrderOut):
    """Order as shown on a staff board, with the statuses it may move to."""
    next_statuses: List[OrderStatus] = []


class KitchenBoardOut(BaseModel):
    """Two-column kitchen display."""
    pendiente: List[OrderViewOut]
    preparando: List[OrderViewOut]


class CreateOrderResponse(BaseModel):
    success: bool
    message: str
    order_id: Optional[str] = None
    errors: Optional[dict] = None


class StatusUpdateRequest(BaseModel):
    status: OrderStatus


class StatusUpdateResponse(BaseModel):
    success: bool
    message: str
    code: StatusUpdateCode


class TableOrderLine(BaseModel):
    menu_item_id: int
    quantity: int = Field(default=1, ge=1)


class TableOrderRequest(BaseModel):
    """Waitstaff submission for a dining-room table."""
    table: str = Field(min_length=1)
    items: List[TableOrderLine] = Field(min_length=1)
