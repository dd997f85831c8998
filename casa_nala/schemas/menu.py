"""
Menu Item Schemas for Casa Nala
===============================

Pydantic models for menu item CRUD. Menu items are reference data: the
ordering flow reads them, only admins write them.

Endpoint Coverage:
------------------
- GET /menu: Public menu, ordered by category then name
- GET /admin/menu: List all menu items
- POST /admin/menu: Create a new menu item
- GET /admin/menu/{id}: Get a specific menu item
- PUT /admin/menu/{id}: Update a menu item
- DELETE /admin/menu/{id}: Delete a menu item

Validation:
-----------
- name: at least 3 characters
- price: strictly positive
- category: non-empty
- image_url: an http(s) URL, or empty for no image

Usage:
------
    item_data = MenuItemCreate(
        name="Pozole Rojo",
        category="Platos Fuertes",
        price=120,
        description="Tradicional pozole de cerdo con chile guajillo.",
    )
"""

from typing import Optional

from pydantic import (
    AliasChoices,
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

_HTTP_URL = TypeAdapter(AnyHttpUrl)


def _check_image_url(v: Optional[str]) -> Optional[str]:
    """Empty means no image, anything else must be an http(s) URL."""
    if v is None or not v.strip():
        return None
    try:
        return str(_HTTP_URL.validate_python(v.strip()))
    except ValidationError:
        raise ValueError("Debe ser una URL válida.")


class MenuItemOut(BaseModel):
    """
    Response model for menu item data.

    Attributes:
        id: Database primary key
        name: Display name (e.g., "Pozole Rojo")
        description: Short description shown on the menu card
        price: Price in pesos
        category: Grouping category (e.g., "Antojitos", "Bebidas")
        image_url: Optional picture
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    price: float
    category: str
    image_url: Optional[str] = None


class MenuItemCreate(BaseModel):
    """
    Request model for creating a new menu item.

    Example:
        {
            "name": "Sopes de Chicharrón",
            "description": "Sopes con chicharrón prensado y salsa verde.",
            "price": 42,
            "category": "Antojitos",
            "imageUrl": ""
        }
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=3)
    description: Optional[str] = None
    price: float = Field(gt=0)
    category: str = Field(min_length=1)
    image_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("imageUrl", "image_url"))

    @field_validator("image_url")
    @classmethod
    def valid_image_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_image_url(v)


class MenuItemUpdate(BaseModel):
    """Request model for updating a menu item. Only provided fields change."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, min_length=3)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, gt=0)
    category: Optional[str] = Field(default=None, min_length=1)
    image_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("imageUrl", "image_url"))

    @field_validator("image_url")
    @classmethod
    def valid_image_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_image_url(v)
