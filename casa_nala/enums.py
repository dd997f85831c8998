"""
Closed enumerations shared by models, schemas and services.

Status, order type and role values are persisted as their string values,
so the enums subclass ``str`` and compare equal to the raw strings.
"""

from enum import Enum
from typing import Optional


class OrderStatus(str, Enum):
    """Stage of an order in fulfillment."""
    PENDIENTE = "pendiente"
    PREPARANDO = "preparando"
    LISTO_RECOGER = "listo_recoger"
    EN_CAMINO = "en_camino"
    COMPLETADO = "completado"
    CANCELADO = "cancelado"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.COMPLETADO, OrderStatus.CANCELADO)


class OrderType(str, Enum):
    """How the customer receives the order. Fixed at creation."""
    RECOGER = "recoger"
    DOMICILIO = "domicilio"


class Role(str, Enum):
    """Session roles. Anything unrecognised resolves to CLIENTE."""
    ADMIN = "admin"
    COCINA = "cocina"
    MESERO = "mesero"
    CLIENTE = "cliente"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Role":
        """Map a stored role string to a Role, defaulting to CLIENTE."""
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.CLIENTE


STAFF_ROLES = frozenset({Role.ADMIN, Role.COCINA, Role.MESERO})


class StatusUpdateCode(str, Enum):
    """Outcome of a status change request."""
    OK = "ok"
    INVALID_REQUEST = "invalid_request"
    NOT_FOUND = "not_found"
    INVALID_TRANSITION = "invalid_transition"
    STORE_ERROR = "store_error"
