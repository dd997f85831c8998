"""
Checkout Schemas for Casa Nala
==============================

POST /checkout takes the cart as menu item ids with quantities. Prices and
names come from the stored menu, never from the client.

Example:
--------
    {
        "items": [{"menu_item_id": 1, "quantity": 2}, {"menu_item_id": 6, "quantity": 1}],
        "order_type": "domicilio",
        "pickup_window": "30min",
        "customer": {"name": "Ana", "phone": "33 1234 5678"},
        "address": {"calle": "Av. Juárez", "numero": "12", "colonia": "Centro", "codigo_postal": "44100"}
    }
"""

from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..enums import OrderType


class AddressForm(BaseModel):
    """Delivery address as entered at checkout."""
    model_config = ConfigDict(populate_by_name=True)

    calle: str = ""
    numero: str = ""
    colonia: str = ""
    codigo_postal: str = Field(default="", validation_alias=AliasChoices("codigoPostal", "codigo_postal"))
    referencias: Optional[str] = None

    def as_text(self) -> str:
        text = f"{self.calle.strip()} {self.numero.strip()}, {self.colonia.strip()}, C.P. {self.codigo_postal.strip()}"
        if self.referencias and self.referencias.strip():
            text += f" (Ref: {self.referencias.strip()})"
        return text


class CheckoutForm(BaseModel):
    """Customer details collected at checkout. Checked by validate_checkout."""
    name: str = ""
    phone: str = ""
    pickup_window: str = ""
    notes: Optional[str] = None
    order_type: OrderType = OrderType.RECOGER
    address: Optional[AddressForm] = None


class CheckoutLine(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    menu_item_id: int = Field(validation_alias=AliasChoices("menuItemId", "menu_item_id", "id"))
    quantity: int = Field(default=1, ge=1)


class CheckoutCustomer(BaseModel):
    name: str = ""
    phone: str = ""
    notes: Optional[str] = None


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: List[CheckoutLine] = []
    order_type: OrderType = Field(
        default=OrderType.RECOGER, validation_alias=AliasChoices("orderType", "order_type", "type")
    )
    pickup_window: str = Field(default="", validation_alias=AliasChoices("pickupWindow", "pickup_window", "horario"))
    customer: CheckoutCustomer = CheckoutCustomer()
    address: Optional[AddressForm] = None


class CheckoutLineOut(BaseModel):
    menu_item_id: int
    name: str
    unit_price: float
    quantity: int
    line_total: float


class CheckoutResponse(BaseModel):
    """Confirmation summary on success; field errors on failure."""
    success: bool
    message: str
    order_id: Optional[str] = None
    lines: List[CheckoutLineOut] = []
    subtotal: Optional[float] = None
    delivery_fee: Optional[float] = None
    total: Optional[float] = None
    errors: Dict[str, object] = {}
