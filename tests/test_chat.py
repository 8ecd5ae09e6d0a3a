from __future__ import annotations

import asyncio
import json

import httpx

from mwplu.chat import AiChatClient, ChatSession
from mwplu.chat.client import EMPTY_MESSAGE_ERROR, MISSING_DOCUMENT_ERROR, SEND_ERROR

WEBHOOK = "https://chat.example.test/webhook"


def _client(handler) -> AiChatClient:
    return AiChatClient(webhook_url=WEBHOOK, timeout=5, transport=httpx.MockTransport(handler))


def test_send_message_validation() -> None:
    client = _client(lambda request: httpx.Response(200, json={}))

    assert asyncio.run(client.send_message("   ", "doc-1")) == {"success": False, "error": EMPTY_MESSAGE_ERROR}
    assert asyncio.run(client.send_message("Bonjour", None)) == {"success": False, "error": MISSING_DOCUMENT_ERROR}
    assert client.error == MISSING_DOCUMENT_ERROR


def test_send_message_posts_json() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"output": "La hauteur est limitée à 15 m."})

    result = asyncio.run(_client(handler).send_message("  Hauteur max ?  ", "doc-1"))

    assert result == {"success": True, "data": {"output": "La hauteur est limitée à 15 m."}}
    assert seen["url"] == WEBHOOK
    assert seen["body"] == {"message": "Hauteur max ?", "document_id": "doc-1"}


def test_send_message_http_error_uses_server_message() -> None:
    client = _client(lambda request: httpx.Response(500, json={"message": "Service indisponible"}))

    result = asyncio.run(client.send_message("Bonjour", "doc-1"))

    assert result == {"success": False, "error": "Service indisponible"}
    assert client.is_loading is False


def test_send_message_http_error_default_message() -> None:
    client = _client(lambda request: httpx.Response(502, text="bad gateway"))

    assert asyncio.run(client.send_message("Bonjour", "doc-1")) == {"success": False, "error": SEND_ERROR}


def test_session_records_exchange() -> None:
    session = ChatSession(document_id="doc-1")
    client = _client(lambda request: httpx.Response(200, json=[{"output": "Réponse", "session_id": "s-1"}]))

    result = asyncio.run(session.ask(client, "Question"))

    assert result["success"] is True
    assert [(message.role, message.message) for message in session.messages] == [
        ("user", "Question"),
        ("assistant", "Réponse"),
    ]
    assert session.messages[0].id.startswith("temp-")
    assert session.is_loading is False


def test_session_keeps_session_id() -> None:
    session = ChatSession(document_id="doc-1")
    client = _client(lambda request: httpx.Response(200, json={"response": "Oui", "session_id": "s-42"}))

    asyncio.run(session.ask(client, "Question"))

    assert session.session_id == "s-42"
    session.clear_messages()
    assert session.session_id is None
    assert session.has_messages is False


def test_session_error_keeps_question() -> None:
    session = ChatSession(document_id="doc-1")
    client = _client(lambda request: httpx.Response(500, json={}))

    result = asyncio.run(session.ask(client, "Question"))

    assert result == {"success": False, "error": SEND_ERROR}
    assert session.error == SEND_ERROR
    assert [(message.role, message.message) for message in session.messages] == [("user", "Question")]


def test_streamed_reply_updates_last_message() -> None:
    session = ChatSession(document_id="doc-1")
    client = _client(lambda request: httpx.Response(200, content=b"Bonjour, la zone UA"))

    result = asyncio.run(session.ask(client, "Zone ?", stream=True))

    assert result == {"success": True, "data": "Bonjour, la zone UA"}
    assert session.messages[-1].role == "assistant"
    assert session.messages[-1].message == "Bonjour, la zone UA"
    assert session.messages[-1].metadata == {}


def test_stream_error_sets_session_error() -> None:
    session = ChatSession(document_id="doc-1")
    client = _client(lambda request: httpx.Response(503, json={"message": "Surcharge"}))

    result = asyncio.run(session.ask(client, "Zone ?", stream=True))

    assert result == {"success": False, "error": "Surcharge"}
    assert session.error == "Surcharge"
    assert [(message.role, message.message) for message in session.messages] == [("user", "Zone ?")]


def test_blank_question_is_not_recorded() -> None:
    session = ChatSession(document_id="doc-1")
    client = _client(lambda request: httpx.Response(200, json={}))

    result = asyncio.run(session.ask(client, "   "))

    assert result == {"success": False, "error": EMPTY_MESSAGE_ERROR}
    assert session.messages == []


def test_popup_state() -> None:
    session = ChatSession()
    session.toggle_popup()
    assert session.is_popup_open is True
    session.close_popup()
    assert session.is_popup_open is False
    session.open_popup()
    assert session.is_popup_open is True
