"""
Configuration Module for Casa Nala
==================================

This module centralizes all configuration settings, environment variables, and
constants used throughout the Casa Nala ordering service. Values are parsed
and typed at module load time so configuration errors surface early.

Configuration Categories:
-------------------------
- **Database**: Connection URL for the order/menu store.

- **Ordering**: Delivery surcharge, pickup time windows and the restaurant
  line used for table (dine-in) orders.

- **Delivery Zone**: Restaurant coordinates and the delivery radius used by
  the geofence check and the chatbot's location hints.

- **Authentication**: Auth cookie name and the bootstrap admin profile.

- **Rate Limiting**: Throttling for order submission and chatbot endpoints.

- **LLM**: OpenAI credentials, model name and integration-boundary timeout
  and retry settings.

- **CORS Settings**: Allowed origins for the storefront and staff frontends.

Environment Variables:
----------------------
- DATABASE_URL: SQLAlchemy URL (default: "sqlite:///./casa_nala.db")
- DELIVERY_FEE: Fixed surcharge for "domicilio" orders (default: 40)
- AUTH_COOKIE_NAME: Name of the session cookie (default: "casa_nala_session")
- ADMIN_EMAIL / ADMIN_PASSWORD: Bootstrap admin created by the seed script
- OPENAI_API_KEY / OPENAI_MODEL: LLM credentials and model
- RATE_LIMIT_ORDERS / RATE_LIMIT_CHAT / RATE_LIMIT_ENABLED
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")

Usage:
------
    from casa_nala.config import DELIVERY_FEE, PICKUP_WINDOWS
"""

import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

load_dotenv()


# =============================================================================
# Database Configuration
# =============================================================================

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./casa_nala.db")


# =============================================================================
# Ordering Configuration
# =============================================================================

RESTAURANT_NAME: str = os.getenv("RESTAURANT_NAME", "Casa Nala")

# Fixed surcharge added to every "domicilio" order total
DELIVERY_FEE: float = float(os.getenv("DELIVERY_FEE", "40"))

# Pickup/delivery time windows offered at checkout
PICKUP_WINDOWS = ("15min", "30min", "1hr", "2hrs", "custom")

# Table orders taken by waitstaff carry the restaurant's own line
DINE_IN_PHONE: str = os.getenv("DINE_IN_PHONE", "3300000000")
DINE_IN_NOTE = "Pedido en sitio"

# Tables offered to waitstaff when taking an order in the dining room
DINING_TABLES = ("1", "2", "3", "4", "5", "6", "Barra 1", "Barra 2", "Terraza 1")

# Tolerance when comparing a submitted total with the computed one
TOTAL_TOLERANCE = 0.005


# =============================================================================
# Delivery Zone Configuration
# =============================================================================

RESTAURANT_LATITUDE: float = float(os.getenv("RESTAURANT_LATITUDE", "20.6843"))
RESTAURANT_LONGITUDE: float = float(os.getenv("RESTAURANT_LONGITUDE", "-103.3167"))
DELIVERY_RADIUS_KM: float = float(os.getenv("DELIVERY_RADIUS_KM", "10"))


# =============================================================================
# Authentication Configuration
# =============================================================================
# The auth cookie holds an opaque session token. Role is resolved per request
# from the user's profile record.

AUTH_COOKIE_NAME: str = os.getenv("AUTH_COOKIE_NAME", "casa_nala_session")
AUTH_COOKIE_SECURE: bool = os.getenv("AUTH_COOKIE_SECURE", "false").lower() == "true"

ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "admin@casanala.mx")
ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")


# =============================================================================
# Rate Limiting Configuration
# =============================================================================
# Uses slowapi with in-memory storage (use Redis for multi-worker deployments).

RATE_LIMIT_ORDERS: str = os.getenv("RATE_LIMIT_ORDERS", "20 per minute")
RATE_LIMIT_CHAT: str = os.getenv("RATE_LIMIT_CHAT", "30 per minute")
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"


def get_rate_limit_orders() -> str:
    """Return the order submission rate limit (allows override in tests)."""
    return RATE_LIMIT_ORDERS


def get_rate_limit_chat() -> str:
    """Return the chatbot rate limit (allows override in tests)."""
    return RATE_LIMIT_CHAT


# =============================================================================
# LLM Configuration
# =============================================================================

OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
LLM_TIMEOUT_SECONDS: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "20"))
LLM_MAX_RETRIES: int = int(os.getenv("LLM_MAX_RETRIES", "2"))

# Maximum question length accepted by the chatbot endpoint
MAX_QUESTION_LENGTH: int = int(os.getenv("MAX_QUESTION_LENGTH", "1000"))

CHAT_FALLBACK_ANSWER = "Lo siento, no pude procesar tu pregunta en este momento."
RECOMMENDATIONS_FALLBACK_MESSAGE = "Lo siento, no pude generar recomendaciones en este momento."


# =============================================================================
# CORS Configuration
# =============================================================================
# Format: comma-separated list, e.g. "https://casanala.mx,https://staff.casanala.mx"

_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]


# =============================================================================
# Admin Console Sections
# =============================================================================
# Each section lists the roles allowed to open it. The console index only
# shows the sections the caller's role can use.

ADMIN_SECTIONS: List[Dict[str, Any]] = [
    {
        "title": "Gestión de Menú",
        "path": "/admin/menu",
        "description": "Agregar, editar o eliminar platillos y categorías.",
        "roles": ["admin"],
    },
    {
        "title": "Control de Inventario",
        "path": "/admin/inventory",
        "description": "Administrar ingredientes y stock.",
        "roles": ["admin"],
    },
    {
        "title": "Pedidos para Cocina",
        "path": "/admin/kitchen",
        "description": "Ver y gestionar pedidos entrantes para la cocina.",
        "roles": ["admin", "cocina"],
    },
    {
        "title": "Pedidos a Domicilio",
        "path": "/admin/delivery",
        "description": "Ver y gestionar pedidos para entrega.",
        "roles": ["admin", "mesero"],
    },
    {
        "title": "Pedidos para Recoger",
        "path": "/admin/pickup",
        "description": "Ver y gestionar pedidos para recoger en tienda.",
        "roles": ["admin", "mesero"],
    },
    {
        "title": "Pedidos en Mesa",
        "path": "/mesero/orders",
        "description": "Tomar pedidos de las mesas y enviarlos a cocina.",
        "roles": ["admin", "mesero"],
    },
    {
        "title": "Gestión de Horarios",
        "path": "/admin/settings",
        "description": "Actualizar horarios de apertura y promociones.",
        "roles": ["admin"],
    },
    {
        "title": "Usuarios y Roles",
        "path": "/admin/users",
        "description": "Dar de alta personal y asignar roles.",
        "roles": ["admin"],
    },
]
