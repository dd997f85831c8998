"""
Order Lifecycle Service for Casa Nala
=====================================

This module owns every write to the orders collection: creating orders from
checkout or waitstaff submissions and moving them through the fulfillment
lifecycle. Staff boards read through ``services.views``.

Key Functions:
--------------
- create_order: Validate a payload and persist a new "pendiente" order
- get_orders: Filtered listing, newest first
- transition_order: Apply one legal status change (raises on illegal moves)
- update_order_status: Same as transition_order but never raises
- start_preparing / mark_ready / cancel_order / complete_order: Staff actions
- create_table_order: Waitstaff order for a dining-room table

Status Transitions:
-------------------
    pendiente     -> preparando, cancelado
    preparando    -> listo_recoger (recoger only), en_camino (domicilio only), cancelado
    listo_recoger -> completado, cancelado
    en_camino     -> completado, cancelado
    completado, cancelado: terminal

Any other move raises InvalidTransitionError.

Totals:
-------
    subtotal = sum(unit_price * quantity)
    total    = subtotal + DELIVERY_FEE (domicilio only)

The submitted total must match the computed total.

Idempotency:
------------
There is none. Two identical submissions create two orders, each a distinct
customer action.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from .. import config
from ..enums import OrderStatus, OrderType, StatusUpdateCode
from ..models import MenuItem, Order, OrderItem
from ..schemas.orders import OrderCreate
from ..view_cache import invalidate_order_views


logger = logging.getLogger(__name__)


# =============================================================================
# Errors and Results
# =============================================================================

class OrderError(Exception):
    """Base class for order lifecycle errors."""


class OrderNotFoundError(OrderError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class InvalidTransitionError(OrderError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(self, order_id: str, current: OrderStatus, requested: Any, order_type: OrderType):
        self.order_id = order_id
        self.current = current
        self.requested = requested
        self.order_type = order_type
        super().__init__(
            f"Cannot move {order_type.value} order {order_id} from {current.value} to {requested}"
        )


class OrderStoreError(OrderError):
    """The order store failed. The message is safe to show to users."""


@dataclass
class CreateOrderResult:
    success: bool
    message: str
    order_id: Optional[str] = None
    errors: Optional[Dict[str, List[str]]] = None


@dataclass
class StatusUpdateResult:
    success: bool
    message: str
    code: StatusUpdateCode = StatusUpdateCode.OK
    order: Optional[Order] = field(default=None, repr=False)


# =============================================================================
# Transition Table
# =============================================================================

TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDIENTE: frozenset({OrderStatus.PREPARANDO, OrderStatus.CANCELADO}),
    OrderStatus.PREPARANDO: frozenset({
        OrderStatus.LISTO_RECOGER,
        OrderStatus.EN_CAMINO,
        OrderStatus.CANCELADO,
    }),
    OrderStatus.LISTO_RECOGER: frozenset({OrderStatus.COMPLETADO, OrderStatus.CANCELADO}),
    OrderStatus.EN_CAMINO: frozenset({OrderStatus.COMPLETADO, OrderStatus.CANCELADO}),
    OrderStatus.COMPLETADO: frozenset(),
    OrderStatus.CANCELADO: frozenset(),
}

# Ready statuses only exist for one order type each
_STATUS_ORDER_TYPE = {
    OrderStatus.LISTO_RECOGER: OrderType.RECOGER,
    OrderStatus.EN_CAMINO: OrderType.DOMICILIO,
}


def ready_status_for(order_type: OrderType) -> OrderStatus:
    """Status an order moves to when the kitchen marks it ready."""
    if OrderType(order_type) == OrderType.DOMICILIO:
        return OrderStatus.EN_CAMINO
    return OrderStatus.LISTO_RECOGER


def allowed_transitions(current: OrderStatus, order_type: OrderType) -> FrozenSet[OrderStatus]:
    """Statuses reachable in one step from ``current`` for this order type."""
    order_type = OrderType(order_type)
    return frozenset(
        status
        for status in TRANSITIONS[OrderStatus(current)]
        if _STATUS_ORDER_TYPE.get(status, order_type) == order_type
    )


def is_allowed_transition(current: OrderStatus, new: OrderStatus, order_type: OrderType) -> bool:
    return OrderStatus(new) in allowed_transitions(current, order_type)


# =============================================================================
# Validation Helpers
# =============================================================================

_FIELD_MESSAGES = {
    "items": "El pedido debe tener al menos un platillo.",
    "total": "El total del pedido debe ser positivo.",
    "quantity": "La cantidad debe ser al menos 1.",
    "unitPrice": "El precio debe ser un número positivo.",
    "unit_price": "El precio debe ser un número positivo.",
    "price": "El precio debe ser un número positivo.",
    "type": "El tipo de pedido debe ser 'recoger' o 'domicilio'.",
    "name": "Se requiere el nombre del cliente.",
    "phone": "Se requiere un teléfono válido (al menos 10 dígitos).",
    "customer": "Se requieren los datos del cliente.",
}


def flatten_validation_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Turn a pydantic ValidationError into {"customer.phone": [msg, ...]}."""
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        path = ".".join(loc) or "payload"
        if err.get("type") == "value_error" and "error" in err.get("ctx", {}):
            message = str(err["ctx"]["error"])
        else:
            field_names = [part for part in loc if not part.isdigit()]
            key = field_names[-1] if field_names else ""
            message = _FIELD_MESSAGES.get(key, err.get("msg", "Valor inválido."))
        errors.setdefault(path, []).append(message)
    return errors


def compute_totals(
    items: Iterable[Tuple[float, int]],
    order_type: OrderType,
) -> Tuple[float, float, float]:
    """
    Compute (subtotal, delivery_fee, total) for (unit_price, quantity) pairs.
    """
    subtotal = round(sum(price * qty for price, qty in items), 2)
    fee = config.DELIVERY_FEE if OrderType(order_type) == OrderType.DOMICILIO else 0.0
    return subtotal, fee, round(subtotal + fee, 2)


def _menu_id(item_id: Any) -> Optional[int]:
    text = str(item_id).strip()
    return int(text) if text.isdigit() else None


def check_menu_prices(db: Session, items: Sequence[Any]) -> Dict[str, List[str]]:
    """
    Lines that reference a stored menu item must carry its current price.

    Lines whose id is not on the menu keep the submitted price.
    """
    ids = {_menu_id(item.id) for item in items} - {None}
    if not ids:
        return {}
    prices = dict(db.query(MenuItem.id, MenuItem.price).filter(MenuItem.id.in_(ids)).all())

    errors: Dict[str, List[str]] = {}
    for index, item in enumerate(items):
        price = prices.get(_menu_id(item.id))
        if price is not None and abs(price - item.unit_price) > config.TOTAL_TOLERANCE:
            errors[f"items.{index}.unitPrice"] = [f"El precio de {item.name} es {price:.2f}."]
    return errors


# =============================================================================
# Create
# =============================================================================

def create_order(db: Session, payload: Any, source: str = "web") -> CreateOrderResult:
    """
    Validate ``payload`` and persist a new order with status "pendiente".

    Validation errors are returned in the result, never raised. Store
    failures are logged and reported with a generic message.
    """
    try:
        data = OrderCreate.model_validate(payload)
    except ValidationError as exc:
        errors = flatten_validation_errors(exc)
        logger.info("Order rejected by validation: %s", sorted(errors))
        return CreateOrderResult(
            success=False,
            message="Error de validación al crear el pedido.",
            errors=errors,
        )

    # The schema only makes the address optional; delivery needs one
    if data.type == OrderType.DOMICILIO and not data.customer.address:
        return CreateOrderResult(
            success=False,
            message="La dirección es requerida para pedidos a domicilio.",
            errors={"customer.address": ["La dirección es requerida."]},
        )

    try:
        price_errors = check_menu_prices(db, data.items)
    except SQLAlchemyError:
        logger.exception("Error loading menu prices")
        return CreateOrderResult(success=False, message="Error interno al crear el pedido.")
    if price_errors:
        logger.info("Order rejected, prices differ from the menu: %s", sorted(price_errors))
        return CreateOrderResult(
            success=False,
            message="Los precios no coinciden con el menú.",
            errors=price_errors,
        )

    subtotal, fee, expected_total = compute_totals(
        ((item.unit_price, item.quantity) for item in data.items), data.type
    )
    if abs(expected_total - data.total) > config.TOTAL_TOLERANCE:
        return CreateOrderResult(
            success=False,
            message="El total del pedido no coincide con los platillos.",
            errors={"total": [f"El total esperado es {expected_total:.2f}."]},
        )

    now = datetime.now(timezone.utc)
    order = Order(
        status=OrderStatus.PENDIENTE.value,
        order_type=data.type.value,
        source=source,
        customer_name=data.customer.name,
        customer_phone=data.customer.phone,
        customer_address=data.customer.address,
        customer_notes=data.customer.notes,
        pickup_window=data.pickup_window,
        subtotal=subtotal,
        delivery_fee=fee,
        total=expected_total,
        created_at=now,
        updated_at=now,
    )
    for position, item in enumerate(data.items):
        order.items.append(OrderItem(
            position=position,
            item_ref=str(item.id),
            name=item.name,
            unit_price=item.unit_price,
            quantity=item.quantity,
            line_total=round(item.unit_price * item.quantity, 2),
        ))

    try:
        db.add(order)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating order")
        return CreateOrderResult(success=False, message="Error interno al crear el pedido.")

    logger.info("Order %s created (%s, source=%s)", order.id, order.order_type, source)
    invalidate_order_views()
    return CreateOrderResult(success=True, message="Pedido creado exitosamente.", order_id=order.id)


def create_table_order(db: Session, table: str, lines: Sequence[Tuple[int, int]]) -> CreateOrderResult:
    """
    Create a dining-room order taken by waitstaff.

    ``lines`` are (menu_item_id, quantity) pairs priced against the stored menu.
    Table orders are "recoger" orders under the restaurant's own phone line.
    """
    ids = {menu_item_id for menu_item_id, _ in lines}
    try:
        menu = {m.id: m for m in db.query(MenuItem).filter(MenuItem.id.in_(ids)).all()}
    except SQLAlchemyError:
        logger.exception("Error loading menu for table %s", table)
        return CreateOrderResult(success=False, message="Error interno al crear el pedido.")

    missing = {
        f"items.{index}.menu_item_id": ["El platillo no existe en el menú."]
        for index, (menu_item_id, _) in enumerate(lines)
        if menu_item_id not in menu
    }
    if missing:
        return CreateOrderResult(success=False, message="Error de validación al crear el pedido.", errors=missing)

    items = [
        {"id": menu[menu_item_id].id, "name": menu[menu_item_id].name,
         "unitPrice": menu[menu_item_id].price, "quantity": quantity}
        for menu_item_id, quantity in lines
    ]
    _, _, total = compute_totals(((i["unitPrice"], i["quantity"]) for i in items), OrderType.RECOGER)
    payload = {
        "items": items,
        "total": total,
        "type": OrderType.RECOGER.value,
        "customer": {
            "name": f"Mesa {table}",
            "phone": config.DINE_IN_PHONE,
            "notes": config.DINE_IN_NOTE,
        },
    }
    return create_order(db, payload, source="mesero")


# =============================================================================
# Read
# =============================================================================

def get_orders(
    db: Session,
    statuses: Optional[Iterable[OrderStatus]] = None,
    order_type: Optional[OrderType] = None,
) -> List[Order]:
    """
    Return orders matching the filter, newest first.

    An empty or missing status set means "any status". There is no
    pagination; the full matching set is returned.
    """
    status_values = sorted({OrderStatus(s).value for s in statuses or ()})
    try:
        query = db.query(Order).options(selectinload(Order.items))
        if status_values:
            query = query.filter(Order.status.in_(status_values))
        if order_type is not None:
            query = query.filter(Order.order_type == OrderType(order_type).value)
        return query.order_by(Order.created_at.desc()).all()
    except SQLAlchemyError as exc:
        logger.exception("Error fetching orders")
        raise OrderStoreError("No se pudieron obtener los pedidos.") from exc


def orders_fingerprint(db: Session) -> Tuple[int, Optional[datetime]]:
    """
    Row count and latest ``updated_at`` of the orders collection.

    Creation changes the count and every status change refreshes
    ``updated_at``, so any write from any process changes the fingerprint.
    """
    try:
        count, last_update = db.query(func.count(Order.id), func.max(Order.updated_at)).one()
    except SQLAlchemyError as exc:
        logger.exception("Error reading orders fingerprint")
        raise OrderStoreError("No se pudieron obtener los pedidos.") from exc
    return count, last_update


def get_order(db: Session, order_id: str) -> Order:
    try:
        order = db.get(Order, order_id)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching order %s", order_id)
        raise OrderStoreError("No se pudo obtener el pedido.") from exc
    if order is None:
        raise OrderNotFoundError(order_id)
    return order


# =============================================================================
# Status Changes
# =============================================================================

def transition_order(db: Session, order_id: str, new_status: Any) -> Order:
    """
    Move an order to ``new_status``.

    Raises:
        OrderNotFoundError: No order with this id.
        InvalidTransitionError: The move is not in the transition table
            for the order's current status and type.
        OrderStoreError: The store failed to load or save the order.
    """
    order = get_order(db, order_id)
    current = OrderStatus(order.status)
    order_type = OrderType(order.order_type)

    try:
        requested = OrderStatus(new_status)
    except ValueError:
        raise InvalidTransitionError(order_id, current, new_status, order_type)

    if not is_allowed_transition(current, requested, order_type):
        raise InvalidTransitionError(order_id, current, requested.value, order_type)

    order.status = requested.value
    order.updated_at = datetime.now(timezone.utc)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Error updating status for order %s", order_id)
        raise OrderStoreError("Error al actualizar el estado del pedido.") from exc

    logger.info("Order %s status %s -> %s", order_id, current.value, requested.value)
    invalidate_order_views()
    return order


def update_order_status(db: Session, order_id: str, new_status: Any) -> StatusUpdateResult:
    """Apply a status change and report the outcome instead of raising."""
    if not order_id or not new_status:
        return StatusUpdateResult(
            success=False,
            message="ID del pedido y nuevo estado son requeridos.",
            code=StatusUpdateCode.INVALID_REQUEST,
        )
    try:
        order = transition_order(db, order_id, new_status)
    except OrderNotFoundError:
        return StatusUpdateResult(
            success=False, message="Pedido no encontrado.", code=StatusUpdateCode.NOT_FOUND
        )
    except InvalidTransitionError as exc:
        logger.warning("Rejected status change: %s", exc)
        return StatusUpdateResult(
            success=False,
            message=(
                f"No se puede cambiar el pedido de '{exc.current.value}' a '{exc.requested}'."
            ),
            code=StatusUpdateCode.INVALID_TRANSITION,
        )
    except OrderStoreError as exc:
        return StatusUpdateResult(success=False, message=str(exc), code=StatusUpdateCode.STORE_ERROR)

    return StatusUpdateResult(
        success=True,
        message="Estado del pedido actualizado.",
        code=StatusUpdateCode.OK,
        order=order,
    )


def start_preparing(db: Session, order_id: str) -> StatusUpdateResult:
    return update_order_status(db, order_id, OrderStatus.PREPARANDO)


def mark_ready(db: Session, order_id: str) -> StatusUpdateResult:
    """Move a "preparando" order to its type's ready status."""
    try:
        order = get_order(db, order_id)
    except OrderNotFoundError:
        return StatusUpdateResult(
            success=False, message="Pedido no encontrado.", code=StatusUpdateCode.NOT_FOUND
        )
    except OrderStoreError as exc:
        return StatusUpdateResult(success=False, message=str(exc), code=StatusUpdateCode.STORE_ERROR)
    return update_order_status(db, order_id, ready_status_for(OrderType(order.order_type)))


def cancel_order(db: Session, order_id: str) -> StatusUpdateResult:
    return update_order_status(db, order_id, OrderStatus.CANCELADO)


def complete_order(db: Session, order_id: str) -> StatusUpdateResult:
    return update_order_status(db, order_id, OrderStatus.COMPLETADO)
