"""
Routes Package for Casa Nala
============================

All API route definitions, one APIRouter per domain.

Customer-Facing Routes:
-----------------------
- public.py: Menu, opening hours and the delivery zone check
- orders.py: Order submission and cart checkout
- chat.py: Chatbot answers and recommendations
- auth.py: Login, logout and the current session

Staff Routes (RoleGuard-protected):
-----------------------------------
- admin_console.py: Console index and user/role management
- admin_orders.py: Order listing and status changes
- boards.py: Kitchen, delivery and pickup boards
- mesero.py: Table orders taken by waitstaff
- admin_menu.py: Menu item CRUD
- admin_inventory.py: Inventory and stock
- admin_settings.py: Weekly hours and promotions

Router Registration:
--------------------
Routers are registered in main.py under two prefixes:
1. /api/v1/* - Versioned API
2. /* - Root paths used by the storefront and console

The chatbot router already lives under /api and is only mounted at the root.

Error Handling:
---------------
- 400: Bad request (chatbot input)
- 401: Invalid login
- 403: Access denied by RoleGuard (body carries home/login links)
- 404: Not found
- 409: Illegal status transition or duplicate user
- 422: Validation errors
- 429: Too many requests
- 503: Store failure
"""

from .public import public_router
from .orders import orders_router
from .chat import chat_router
from .auth import auth_router
from .admin_console import admin_console_router
from .admin_orders import admin_orders_router
from .boards import boards_router
from .mesero import mesero_router
from .admin_menu import admin_menu_router
from .admin_inventory import admin_inventory_router
from .admin_settings import admin_settings_router

__all__ = [
    "public_router",
    "orders_router",
    "chat_router",
    "auth_router",
    "admin_console_router",
    "admin_orders_router",
    "boards_router",
    "mesero_router",
    "admin_menu_router",
    "admin_inventory_router",
    "admin_settings_router",
]
