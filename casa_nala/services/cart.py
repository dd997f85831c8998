"""
Cart and checkout flow.

A Cart is a draft order held by the client: menu item ids with quantities,
in the order they were first added. At checkout the cart is priced against
the live menu, the customer form is checked, and the result is submitted to
``create_order``. A successful submission clears the cart; a failed one
leaves it untouched so the customer can fix the form and retry.

Usage:
    cart = Cart()
    cart.add(1)
    cart.add(1)
    cart.add(6)
    result = submit_checkout(db, cart, form)
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from .. import config
from ..enums import OrderType
from ..models import MenuItem
from ..schemas.checkout import AddressForm, CheckoutForm
from ..schemas.orders import count_phone_digits, MIN_PHONE_DIGITS
from .orders import compute_totals, create_order

logger = logging.getLogger(__name__)


class Cart:
    """Menu item id -> quantity. Quantities are always >= 1."""

    def __init__(self):
        self._lines: Dict[int, int] = {}

    def add(self, menu_item_id: int) -> None:
        self._lines[menu_item_id] = self._lines.get(menu_item_id, 0) + 1

    def decrement(self, menu_item_id: int) -> None:
        quantity = self._lines.get(menu_item_id)
        if quantity is None:
            return
        if quantity <= 1:
            del self._lines[menu_item_id]
        else:
            self._lines[menu_item_id] = quantity - 1

    def set_quantity(self, menu_item_id: int, quantity: int) -> None:
        if quantity <= 0:
            self.remove(menu_item_id)
        else:
            self._lines[menu_item_id] = quantity

    def remove(self, menu_item_id: int) -> None:
        self._lines.pop(menu_item_id, None)

    def clear(self) -> None:
        self._lines.clear()

    def quantity(self, menu_item_id: int) -> int:
        return self._lines.get(menu_item_id, 0)

    def lines(self) -> List[tuple]:
        return list(self._lines.items())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)


@dataclass
class CartLine:
    menu_item_id: int
    name: str
    unit_price: float
    quantity: int

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)


@dataclass
class CartSummary:
    lines: List[CartLine]
    subtotal: float
    delivery_fee: float
    total: float
    errors: List[str] = field(default_factory=list)


def price_cart(cart: Cart, menu: Mapping[int, MenuItem], order_type: OrderType) -> CartSummary:
    """Merge cart lines with menu data and compute totals."""
    lines: List[CartLine] = []
    errors: List[str] = []
    for menu_item_id, quantity in cart.lines():
        item = menu.get(menu_item_id)
        if item is None:
            errors.append(f"El platillo {menu_item_id} ya no está disponible.")
            continue
        lines.append(CartLine(menu_item_id, item.name, item.price, quantity))

    subtotal, fee, total = compute_totals(
        ((line.unit_price, line.quantity) for line in lines), order_type
    )
    return CartSummary(lines=lines, subtotal=subtotal, delivery_fee=fee, total=total, errors=errors)


_ADDRESS_FIELDS = ("calle", "numero", "colonia", "codigo_postal")


def validate_checkout(form: CheckoutForm) -> Dict[str, str]:
    """Return field -> message for every missing or invalid field."""
    errors: Dict[str, str] = {}
    if not form.name.strip():
        errors["name"] = "Ingresa tu nombre."
    if count_phone_digits(form.phone) < MIN_PHONE_DIGITS:
        errors["phone"] = "Ingresa un teléfono válido (al menos 10 dígitos)."
    if form.pickup_window not in config.PICKUP_WINDOWS:
        errors["pickup_window"] = "Selecciona un horario."

    if form.order_type == OrderType.DOMICILIO:
        address = form.address or AddressForm()
        for name in _ADDRESS_FIELDS:
            if not getattr(address, name).strip():
                errors[f"address.{name}"] = "Por favor completa todos los campos de dirección de entrega."
    return errors


@dataclass
class CheckoutResult:
    success: bool
    message: str
    order_id: Optional[str] = None
    summary: Optional[CartSummary] = None
    errors: Dict[str, object] = field(default_factory=dict)


def load_menu(db: Session) -> Dict[int, MenuItem]:
    return {item.id: item for item in db.query(MenuItem).all()}


def submit_checkout(
    db: Session,
    cart: Cart,
    form: CheckoutForm,
    menu: Optional[Mapping[int, MenuItem]] = None,
) -> CheckoutResult:
    """
    Validate the form, price the cart and create the order.

    On success the cart is cleared and the priced summary is returned as the
    confirmation. On failure the cart is left as it was.
    """
    if cart.is_empty:
        return CheckoutResult(
            success=False,
            message="El pedido debe tener al menos un platillo.",
            errors={"items": "El carrito está vacío."},
        )

    errors: Dict[str, object] = dict(validate_checkout(form))
    if menu is None:
        menu = load_menu(db)
    summary = price_cart(cart, menu, form.order_type)
    if summary.errors:
        errors["items"] = " ".join(summary.errors)
    if errors:
        return CheckoutResult(
            success=False,
            message="Por favor completa los campos requeridos.",
            summary=summary,
            errors=errors,
        )

    customer = {"name": form.name, "phone": form.phone, "notes": form.notes}
    if form.order_type == OrderType.DOMICILIO:
        customer["address"] = form.address.as_text()

    payload = {
        "items": [
            {"id": line.menu_item_id, "name": line.name, "unitPrice": line.unit_price, "quantity": line.quantity}
            for line in summary.lines
        ],
        "total": summary.total,
        "type": form.order_type.value,
        "customer": customer,
        "pickupWindow": form.pickup_window,
    }
    result = create_order(db, payload)
    if not result.success:
        logger.info("Checkout rejected: %s", result.message)
        return CheckoutResult(
            success=False,
            message=result.message,
            summary=summary,
            errors=result.errors or {},
        )

    cart.clear()
    return CheckoutResult(success=True, message=result.message, order_id=result.order_id, summary=summary)
