"""
Chatbot Schemas for Casa Nala
=============================

Request/response models for the two chatbot endpoints.

Endpoint Coverage:
------------------
- POST /api/chat: Answer a question about the menu
- POST /api/recommendations: Suggest dishes from the stored menu

Field Names:
------------
The storefront sends camelCase (``menuItems``, ``userLocation``,
``dietaryRestrictions``); snake_case is accepted too.
"""

from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class UserLocation(BaseModel):
    latitude: float
    longitude: float


class ChatMenuItem(BaseModel):
    """Menu item as the storefront knows it."""
    model_config = ConfigDict(populate_by_name=True)

    id: Union[int, str, None] = None
    name: str
    description: Optional[str] = ""
    price: float
    category: str = ""
    image_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("imageUrl", "image_url"))


class ChatRequest(BaseModel):
    """
    Both fields are optional here so a missing one is answered with the
    endpoint's own 400 ``{"error": ...}`` body.
    """
    model_config = ConfigDict(populate_by_name=True)

    question: Optional[str] = None
    menu_items: Optional[List[ChatMenuItem]] = Field(
        default=None, validation_alias=AliasChoices("menuItems", "menu_items")
    )
    user_location: Optional[UserLocation] = Field(
        default=None, validation_alias=AliasChoices("userLocation", "user_location")
    )


class ChatResponse(BaseModel):
    answer: str


class RecommendationsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dietary_restrictions: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("dietaryRestrictions", "dietary_restrictions")
    )
    preferences: Optional[str] = None
    past_orders: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("pastOrders", "past_orders")
    )
    user_location: Optional[UserLocation] = Field(
        default=None, validation_alias=AliasChoices("userLocation", "user_location")
    )


class RecommendationsResponse(BaseModel):
    recommendations: List[str]
    message: Optional[str] = None
