"""
Inventory Schemas for Casa Nala
===============================

Pydantic models for the ingredient/stock list managed from the admin console.

Inventory is an independent aggregate: creating an order does not change
stock. Staff update stock by hand with PATCH /admin/inventory/{id}/stock.

Endpoint Coverage:
------------------
- GET /admin/inventory: List items ordered by name
- POST /admin/inventory: Add an item
- PATCH /admin/inventory/{id}/stock: Set the stock level
- DELETE /admin/inventory/{id}: Remove an item
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class InventoryItemOut(BaseModel):
    """
    Response model for an inventory item.

    Attributes:
        is_low_stock: True when a threshold is set and stock is at or below it
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    unit: str
    stock: float
    low_stock_threshold: Optional[float] = None
    supplier: Optional[str] = None
    last_updated: datetime
    is_low_stock: bool = False

    @classmethod
    def from_item(cls, item) -> "InventoryItemOut":
        out = cls.model_validate(item)
        out.is_low_stock = (
            item.low_stock_threshold is not None and item.stock <= item.low_stock_threshold
        )
        return out


class InventoryItemCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=2)
    unit: str = Field(min_length=1)
    stock: float = Field(ge=0)
    low_stock_threshold: Optional[float] = Field(
        default=None, ge=0, validation_alias=AliasChoices("lowStockThreshold", "low_stock_threshold")
    )
    supplier: Optional[str] = None


class StockUpdate(BaseModel):
    stock: float = Field(ge=0)
