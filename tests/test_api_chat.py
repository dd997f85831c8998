"""
API tests for the menu chatbot and recommendations endpoints.
"""
from unittest.mock import MagicMock, patch

from casa_nala import config, llm_client
from casa_nala.rate_limit import limiter


MENU_ITEMS = [
    {"id": 1, "name": "Pozole Rojo", "description": "Pozole de cerdo.", "price": 120,
     "category": "Platos Fuertes", "imageUrl": "https://img.casanala.test/pozole.jpg"},
]


def test_chat_returns_answer(client):
    with patch.object(llm_client, "answer_question", return_value="Sí, hay pozole.") as answer:
        resp = client.post("/api/chat", json={
            "question": "¿Tienen pozole?",
            "menuItems": MENU_ITEMS,
            "userLocation": {"latitude": 20.67, "longitude": -103.35},
        })

    assert resp.status_code == 200
    assert resp.json() == {"answer": "Sí, hay pozole."}
    question, items, location = answer.call_args[0]
    assert question == "¿Tienen pozole?"
    assert items[0].name == "Pozole Rojo"
    assert location == {"latitude": 20.67, "longitude": -103.35}


def test_chat_missing_question(client):
    resp = client.post("/api/chat", json={"menuItems": MENU_ITEMS})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing question or menuItems in request body"}


def test_chat_missing_menu_items(client):
    resp = client.post("/api/chat", json={"question": "hola"})
    assert resp.status_code == 400


def test_chat_question_too_long(client, monkeypatch):
    monkeypatch.setattr(config, "MAX_QUESTION_LENGTH", 10)
    resp = client.post("/api/chat", json={"question": "x" * 11, "menuItems": MENU_ITEMS})
    assert resp.status_code == 400


def test_chat_provider_failure_still_answers(client):
    failing = MagicMock()
    failing.chat.completions.create.side_effect = RuntimeError("provider down")

    with patch.object(llm_client, "get_client", return_value=failing):
        resp = client.post("/api/chat", json={"question": "hola", "menuItems": MENU_ITEMS})

    assert resp.status_code == 200
    assert resp.json()["answer"] == config.CHAT_FALLBACK_ANSWER


def test_chat_is_not_versioned(client):
    resp = client.post("/api/v1/chat", json={"question": "hola", "menuItems": MENU_ITEMS})
    assert resp.status_code == 404


def test_recommendations_use_stored_menu(client):
    with patch.object(llm_client, "get_recommendations", return_value=["Pozole Rojo"]) as recommend:
        resp = client.post("/api/recommendations", json={"dietaryRestrictions": "sin lácteos"})

    assert resp.status_code == 200
    assert resp.json() == {"recommendations": ["Pozole Rojo"], "message": None}
    menu = recommend.call_args[0][0]
    assert len(menu) == 6
    assert recommend.call_args[1]["dietary_restrictions"] == "sin lácteos"


def test_recommendations_fallback_message(client):
    with patch.object(llm_client, "get_recommendations", return_value=[]):
        resp = client.post("/api/recommendations", json={})

    assert resp.json() == {
        "recommendations": [],
        "message": config.RECOMMENDATIONS_FALLBACK_MESSAGE,
    }


def test_chat_rate_limit_returns_429(client, monkeypatch):
    """The chat limit is read per request, so tests can tighten it."""
    monkeypatch.setattr(config, "RATE_LIMIT_CHAT", "2 per minute")
    limiter.reset()
    limiter.enabled = True
    try:
        with patch.object(llm_client, "answer_question", return_value="ok"):
            codes = [
                client.post("/api/chat", json={"question": "hola", "menuItems": MENU_ITEMS}).status_code
                for _ in range(3)
            ]
    finally:
        limiter.enabled = False
        limiter.reset()

    assert codes == [200, 200, 429]
