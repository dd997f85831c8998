"""
LLM client for the Casa Nala chatbot.

Two flows, both thin prompt templates around an OpenAI chat completion:

- answer_question: free-text answer about the menu, optionally aware of the
  customer's location
- get_recommendations: list of dish names, parsed with instructor into a
  pydantic model and filtered to dishes that are on the menu

Provider errors, a missing API key and empty output never reach the caller.
They are logged and replaced by a fallback (a canned apology, or no
recommendations).
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import instructor
from openai import OpenAI
from pydantic import BaseModel, Field

from . import config
from .geo import check_delivery_zone

logger = logging.getLogger(__name__)


CHAT_PROMPT_TEMPLATE = """Eres un amigable asistente de chatbot para Casa Nala, un restaurante de comida mexicana. Usa la información del menú proporcionada para responder la pregunta del cliente. Si el usuario proporciona información de ubicación, considera si es relevante para la respuesta (por ejemplo, para preguntas sobre entrega o distancia). Sé conciso y útil.

Menú:
{menu}

Pregunta: {question}
{location_block}
Respuesta:"""

RECOMMENDATIONS_PROMPT_TEMPLATE = """You are a helpful AI chatbot that provides personalized food recommendations from the restaurant menu.

The menu is:
{menu}
{context}
Recommend some dishes from the menu, considering the user's dietary restrictions, preferences, past orders, and location (if available).

The recommendations should be a list of food item names.
Make sure to only suggest items that are available in the menu."""


class Recommendations(BaseModel):
    recommendations: List[str] = Field(
        default_factory=list, description="A list of food item names from the menu."
    )


class LLMNotConfiguredError(RuntimeError):
    pass


def get_client() -> OpenAI:
    """OpenAI client with the configured timeout and retry count."""
    if not config.OPENAI_API_KEY:
        raise LLMNotConfiguredError("OPENAI_API_KEY not set")
    return OpenAI(
        api_key=config.OPENAI_API_KEY,
        timeout=config.LLM_TIMEOUT_SECONDS,
        max_retries=config.LLM_MAX_RETRIES,
    )


def get_instructor_client():
    """Get instructor-wrapped OpenAI client."""
    return instructor.from_openai(get_client())


def _field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def format_menu(menu_items: Sequence[Any]) -> str:
    """One line per dish: ``name (category): description ($price)``."""
    lines = []
    for item in menu_items:
        price = float(_field(item, "price", 0) or 0)
        lines.append(
            f"{_field(item, 'name', '')} ({_field(item, 'category', '')}): "
            f"{_field(item, 'description', '') or ''} (${price:.2f})"
        )
    return "\n".join(lines)


def format_location(user_location: Optional[Dict[str, float]]) -> Optional[str]:
    if not user_location:
        return None
    try:
        latitude = float(user_location["latitude"])
        longitude = float(user_location["longitude"])
    except (KeyError, TypeError, ValueError):
        logger.warning("Ignoring malformed user location")
        return "No se pudo obtener la información de ubicación."

    zone = check_delivery_zone(latitude, longitude)
    coverage = "dentro" if zone.within_zone else "fuera"
    return (
        f"User location is: Latitude {latitude}, Longitude {longitude}. "
        f"Está a {zone.distance_km:.1f} km del restaurante, {coverage} de la zona de entrega "
        f"({zone.radius_km:g} km)."
    )


def build_chat_prompt(
    question: str,
    menu_items: Sequence[Any],
    user_location: Optional[Dict[str, float]] = None,
) -> str:
    location_info = format_location(user_location)
    location_block = f"\nInformación de Ubicación: {location_info}\n" if location_info else ""
    return CHAT_PROMPT_TEMPLATE.format(
        menu=format_menu(menu_items),
        question=question,
        location_block=location_block,
    )


def answer_question(
    question: str,
    menu_items: Sequence[Any],
    user_location: Optional[Dict[str, float]] = None,
    model: Optional[str] = None,
) -> str:
    """Answer a customer question about the menu. Never raises."""
    prompt = build_chat_prompt(question, menu_items, user_location)
    try:
        client = get_client()
        response = client.chat.completions.create(
            model=model or config.OPENAI_MODEL,
            messages=[{"role": "user", "content": prompt}],
        )
        answer = (response.choices[0].message.content or "").strip()
    except Exception:
        logger.exception("Chatbot answer failed")
        return config.CHAT_FALLBACK_ANSWER

    if not answer:
        logger.warning("Chatbot returned an empty answer")
        return config.CHAT_FALLBACK_ANSWER
    return answer


def build_recommendations_prompt(
    menu_items: Sequence[Any],
    dietary_restrictions: Optional[str] = None,
    preferences: Optional[str] = None,
    past_orders: Optional[str] = None,
    user_location: Optional[Dict[str, float]] = None,
) -> str:
    menu = "\n".join(
        f"- {_field(i, 'name', '')}: {_field(i, 'description', '') or ''} (${float(_field(i, 'price', 0) or 0):.2f})"
        for i in menu_items
    )
    context = []
    if dietary_restrictions:
        context.append(f"The user has the following dietary restrictions: {dietary_restrictions}.")
    if preferences:
        context.append(f"The user has the following food preferences: {preferences}.")
    if past_orders:
        context.append(f"The user has the following past orders: {past_orders}.")
    location_info = format_location(user_location)
    if location_info:
        context.append(location_info)
    return RECOMMENDATIONS_PROMPT_TEMPLATE.format(
        menu=menu,
        context="\n" + "\n".join(context) + "\n" if context else "",
    )


def get_recommendations(
    menu_items: Sequence[Any],
    dietary_restrictions: Optional[str] = None,
    preferences: Optional[str] = None,
    past_orders: Optional[str] = None,
    user_location: Optional[Dict[str, float]] = None,
    model: Optional[str] = None,
) -> List[str]:
    """Recommend dish names from the menu. Returns [] on any failure."""
    prompt = build_recommendations_prompt(
        menu_items, dietary_restrictions, preferences, past_orders, user_location
    )
    try:
        client = get_instructor_client()
        result = client.chat.completions.create(
            model=model or config.OPENAI_MODEL,
            response_model=Recommendations,
            messages=[{"role": "user", "content": prompt}],
        )
    except Exception:
        logger.exception("Recommendations failed")
        return []

    # Keep the menu's spelling and drop anything not on it
    by_name = {str(_field(i, "name", "")).strip().lower(): _field(i, "name") for i in menu_items}
    picked: List[str] = []
    for name in result.recommendations:
        match = by_name.get(name.strip().lower())
        if match and match not in picked:
            picked.append(match)
    if len(picked) < len(result.recommendations):
        logger.debug("Dropped %d recommendations not on the menu", len(result.recommendations) - len(picked))
    return picked
