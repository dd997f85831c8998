"""
Chatbot Routes for Casa Nala
============================

Endpoints:
----------
- POST /api/chat: Answer a customer question about the menu
- POST /api/recommendations: Suggest dishes from the stored menu

Both endpoints are rate limited (RATE_LIMIT_CHAT) and never surface LLM
provider errors: failures come back as a canned apology (chat) or an empty
list with a message (recommendations).

Usage:
------
    POST /api/chat
    {
        "question": "¿Tienen platillos vegetarianos?",
        "menuItems": [{"name": "Quesadilla de Flor de Calabaza", "price": 48, "category": "Antojitos"}],
        "userLocation": {"latitude": 20.67, "longitude": -103.35}
    }
    -> {"answer": "..."}
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from .. import config, llm_client
from ..config import get_rate_limit_chat
from ..db import get_db
from ..models import MenuItem
from ..rate_limit import limiter
from ..schemas.chat import ChatRequest, ChatResponse, RecommendationsRequest, RecommendationsResponse


logger = logging.getLogger(__name__)

chat_router = APIRouter(prefix="/api", tags=["Chat"])


@chat_router.post("/chat", response_model=ChatResponse)
@limiter.limit(get_rate_limit_chat)
def chat(request: Request, payload: ChatRequest):
    question = (payload.question or "").strip()
    if not question or payload.menu_items is None:
        return JSONResponse(
            status_code=400,
            content={"error": "Missing question or menuItems in request body"},
        )
    if len(question) > config.MAX_QUESTION_LENGTH:
        return JSONResponse(
            status_code=400,
            content={"error": f"Question exceeds {config.MAX_QUESTION_LENGTH} characters"},
        )

    location = payload.user_location.model_dump() if payload.user_location else None
    answer = llm_client.answer_question(question, payload.menu_items, location)
    return ChatResponse(answer=answer)


@chat_router.post("/recommendations", response_model=RecommendationsResponse)
@limiter.limit(get_rate_limit_chat)
def recommendations(
    request: Request,
    payload: RecommendationsRequest,
    db: Session = Depends(get_db),
) -> RecommendationsResponse:
    menu = db.query(MenuItem).order_by(MenuItem.category.asc(), MenuItem.name.asc()).all()
    location = payload.user_location.model_dump() if payload.user_location else None
    names = llm_client.get_recommendations(
        menu,
        dietary_restrictions=payload.dietary_restrictions,
        preferences=payload.preferences,
        past_orders=payload.past_orders,
        user_location=location,
    )
    if not names:
        return RecommendationsResponse(
            recommendations=[],
            message=config.RECOMMENDATIONS_FALLBACK_MESSAGE,
        )
    return RecommendationsResponse(recommendations=names)
