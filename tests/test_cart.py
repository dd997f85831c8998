"""
Tests for the cart and checkout flow.
"""
import pytest

from casa_nala import config
from casa_nala.enums import OrderType
from casa_nala.models import MenuItem
from casa_nala.schemas.checkout import AddressForm, CheckoutForm
from casa_nala.services.cart import (
    Cart,
    load_menu,
    price_cart,
    submit_checkout,
    validate_checkout,
)
from casa_nala.services.orders import get_order


ADDRESS = AddressForm(calle="Av. Juárez", numero="12", colonia="Centro", codigo_postal="44100")


def _form(**overrides):
    values = {"name": "Ana López", "phone": "33 1234 5678", "pickup_window": "30min"}
    values.update(overrides)
    return CheckoutForm(**values)


def _cart(*ids):
    cart = Cart()
    for menu_item_id in ids:
        cart.add(menu_item_id)
    return cart


# =============================================================================
# Cart
# =============================================================================

class TestCart:

    def test_add_increments_quantity(self):
        cart = _cart(1, 1, 6)
        assert cart.quantity(1) == 2
        assert cart.quantity(6) == 1
        assert len(cart) == 2

    def test_lines_keep_first_added_order(self):
        cart = _cart(6, 1, 6)
        assert cart.lines() == [(6, 2), (1, 1)]

    def test_decrement_removes_line_at_one(self):
        cart = _cart(1, 1, 6)
        cart.decrement(1)
        cart.decrement(6)
        assert cart.lines() == [(1, 1)]

    def test_decrement_missing_item_is_noop(self):
        cart = _cart(1)
        cart.decrement(99)
        assert cart.lines() == [(1, 1)]

    def test_set_quantity_zero_removes(self):
        cart = _cart(1, 2)
        cart.set_quantity(2, 5)
        cart.set_quantity(1, 0)
        assert cart.lines() == [(2, 5)]

    def test_clear(self):
        cart = _cart(1, 2)
        cart.clear()
        assert cart.is_empty


# =============================================================================
# Pricing
# =============================================================================

class TestPriceCart:

    def test_pickup_totals(self, db_session):
        summary = price_cart(_cart(1, 1, 6), load_menu(db_session), OrderType.RECOGER)

        assert [(line.name, line.quantity, line.line_total) for line in summary.lines] == [
            ("Pozole Rojo", 2, 240.0),
            ("Agua Fresca de Jamaica", 1, 32.0),
        ]
        assert summary.subtotal == 272
        assert summary.delivery_fee == 0
        assert summary.total == 272
        assert summary.errors == []

    def test_delivery_adds_fee(self, db_session):
        summary = price_cart(_cart(1, 1, 6), load_menu(db_session), OrderType.DOMICILIO)
        assert summary.delivery_fee == config.DELIVERY_FEE
        assert summary.total == 272 + config.DELIVERY_FEE

    def test_unknown_item_is_reported(self, db_session):
        summary = price_cart(_cart(1, 42), load_menu(db_session), OrderType.RECOGER)
        assert len(summary.lines) == 1
        assert summary.errors == ["El platillo 42 ya no está disponible."]


# =============================================================================
# Form validation
# =============================================================================

class TestValidateCheckout:

    def test_complete_pickup_form(self):
        assert validate_checkout(_form()) == {}

    def test_missing_fields(self):
        errors = validate_checkout(CheckoutForm())
        assert errors == {
            "name": "Ingresa tu nombre.",
            "phone": "Ingresa un teléfono válido (al menos 10 dígitos).",
            "pickup_window": "Selecciona un horario.",
        }

    def test_short_phone(self):
        assert "phone" in validate_checkout(_form(phone="331-234"))

    def test_delivery_requires_every_address_field(self):
        errors = validate_checkout(_form(
            order_type=OrderType.DOMICILIO,
            address=AddressForm(calle="Av. Juárez", numero="", colonia="Centro", codigo_postal=" "),
        ))
        assert set(errors) == {"address.numero", "address.codigo_postal"}

    def test_delivery_without_address_block(self):
        errors = validate_checkout(_form(order_type=OrderType.DOMICILIO))
        assert set(errors) == {
            "address.calle", "address.numero", "address.colonia", "address.codigo_postal",
        }

    def test_pickup_ignores_address(self):
        assert validate_checkout(_form(address=AddressForm())) == {}


def test_address_as_text_includes_references():
    address = ADDRESS.model_copy(update={"referencias": "Portón verde"})
    assert address.as_text() == "Av. Juárez 12, Centro, C.P. 44100 (Ref: Portón verde)"
    assert ADDRESS.as_text() == "Av. Juárez 12, Centro, C.P. 44100"


# =============================================================================
# Submit
# =============================================================================

class TestSubmitCheckout:

    def test_success_clears_cart_and_creates_order(self, db_session):
        cart = _cart(1, 1, 6)

        result = submit_checkout(db_session, cart, _form())

        assert result.success is True
        assert result.order_id
        assert cart.is_empty
        assert result.summary.total == 272
        order = get_order(db_session, result.order_id)
        assert order.status == "pendiente"
        assert order.pickup_window == "30min"
        assert order.total == pytest.approx(272)

    def test_delivery_order_stores_formatted_address(self, db_session):
        result = submit_checkout(
            db_session, _cart(1, 1, 6), _form(order_type=OrderType.DOMICILIO, address=ADDRESS),
        )

        assert result.success is True
        order = get_order(db_session, result.order_id)
        assert order.customer_address == "Av. Juárez 12, Centro, C.P. 44100"
        assert order.total == pytest.approx(272 + config.DELIVERY_FEE)

    def test_empty_cart_rejected(self, db_session):
        result = submit_checkout(db_session, Cart(), _form())
        assert result.success is False
        assert result.message == "El pedido debe tener al menos un platillo."
        assert "items" in result.errors

    def test_invalid_form_keeps_cart(self, db_session):
        cart = _cart(1, 6)

        result = submit_checkout(db_session, cart, _form(name=""))

        assert result.success is False
        assert result.message == "Por favor completa los campos requeridos."
        assert result.errors == {"name": "Ingresa tu nombre."}
        assert cart.lines() == [(1, 1), (6, 1)]

    def test_unavailable_item_keeps_cart(self, db_session):
        cart = _cart(1, 77)

        result = submit_checkout(db_session, cart, _form())

        assert result.success is False
        assert "items" in result.errors
        assert not cart.is_empty

    def test_uses_supplied_menu(self, db_session):
        menu = {50: MenuItem(id=50, name="Especial del Día", category="Platos Fuertes", price=100.0)}

        result = submit_checkout(db_session, _cart(50), _form(), menu=menu)

        assert result.success is True
        assert result.summary.total == 100
