"""
Schemas Package for Casa Nala
=============================

Pydantic models used for API request validation and response serialization.

Schema Organization:
--------------------
- **orders.py**: Order creation, status changes and staff board payloads
- **checkout.py**: Cart checkout request and confirmation
- **menu.py**: Menu item CRUD
- **inventory.py**: Inventory items and stock updates
- **settings.py**: Weekly hours and promotions
- **chat.py**: Chatbot questions and recommendations
- **users.py**: Login, session and user profile management

Naming Conventions:
-------------------
- *Out: Response models (e.g., MenuItemOut)
- *Create: Request models for POST (e.g., MenuItemCreate)
- *Update: Request models for PUT/PATCH (e.g., MenuItemUpdate)
- *Request / *Response: Other request and response bodies

Input models accept the storefront's camelCase names (``unitPrice``,
``imageUrl``, ``menuItems``) as aliases. Responses use snake_case.
"""

from .orders import (
    OrderCreate,
    OrderOut,
    OrderViewOut,
    KitchenBoardOut,
    CreateOrderResponse,
    StatusUpdateRequest,
    StatusUpdateResponse,
    TableOrderRequest,
)
from .checkout import CheckoutRequest, CheckoutResponse
from .menu import MenuItemOut, MenuItemCreate, MenuItemUpdate
from .inventory import InventoryItemOut, InventoryItemCreate, StockUpdate
from .settings import SiteSettingsOut, SiteSettingsUpdate
from .chat import ChatRequest, ChatResponse, RecommendationsRequest, RecommendationsResponse
from .users import LoginRequest, LoginResponse, SessionOut, UserCreate, UserOut, RoleUpdate

__all__ = [
    "OrderCreate",
    "OrderOut",
    "OrderViewOut",
    "KitchenBoardOut",
    "CreateOrderResponse",
    "StatusUpdateRequest",
    "StatusUpdateResponse",
    "TableOrderRequest",
    "CheckoutRequest",
    "CheckoutResponse",
    "MenuItemOut",
    "MenuItemCreate",
    "MenuItemUpdate",
    "InventoryItemOut",
    "InventoryItemCreate",
    "StockUpdate",
    "SiteSettingsOut",
    "SiteSettingsUpdate",
    "ChatRequest",
    "ChatResponse",
    "RecommendationsRequest",
    "RecommendationsResponse",
    "LoginRequest",
    "LoginResponse",
    "SessionOut",
    "UserCreate",
    "UserOut",
    "RoleUpdate",
]
