from __future__ import annotations

import random
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from .client import AiChatClient, ChatError


@dataclass
class ChatMessage:
    role: str
    message: str
    metadata: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: f"temp-{int(time.time() * 1000)}-{random.random()}")
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _reply_text(data: Any) -> str:
    if isinstance(data, str):
        return data
    if isinstance(data, list) and data:
        data = data[0]
    if isinstance(data, dict):
        for key in ("output", "response", "message", "text"):
            if isinstance(data.get(key), str):
                return data[key]
    return ""


class ChatSession:
    """Local state of one document chat: messages, popup and loading flags."""

    def __init__(self, document_id: Any = None) -> None:
        self.document_id = document_id
        self.messages: list[ChatMessage] = []
        self.session_id: Optional[str] = None
        self.is_popup_open = False
        self.is_loading = False
        self.error: Optional[str] = None

    @property
    def has_messages(self) -> bool:
        return bool(self.messages)

    def add_message(self, role: str, message: str, metadata: Optional[dict[str, Any]] = None) -> ChatMessage:
        new_message = ChatMessage(role=role, message=message, metadata=dict(metadata or {}))
        self.messages.append(new_message)
        return new_message

    def add_user_message(self, message: str) -> ChatMessage:
        return self.add_message("user", message)

    def add_assistant_message(self, message: str, metadata: Optional[dict[str, Any]] = None) -> ChatMessage:
        return self.add_message("assistant", message, metadata)

    def update_last_message(self, message: str) -> None:
        if self.messages:
            self.messages[-1].message = message

    def clear_messages(self) -> None:
        self.messages = []
        self.session_id = None

    def open_popup(self) -> None:
        self.is_popup_open = True

    def close_popup(self) -> None:
        self.is_popup_open = False

    def toggle_popup(self) -> None:
        self.is_popup_open = not self.is_popup_open

    def set_loading(self, loading: bool) -> None:
        self.is_loading = loading

    def set_error(self, message: Optional[str]) -> None:
        self.error = message

    def clear_error(self) -> None:
        self.error = None

    def set_session_id(self, session_id: Optional[str]) -> None:
        self.session_id = session_id

    def load_messages(self, messages: list[ChatMessage]) -> None:
        self.messages = list(messages)

    async def ask(self, client: AiChatClient, text: str, *, stream: bool = False) -> dict[str, Any]:
        """Send ``text`` for this session's document and record both sides of the exchange.

        The question is kept even when the request fails so it can be retried.
        """
        self.clear_error()
        self.set_loading(True)
        if text.strip():
            self.add_user_message(text.strip())
        try:
            if not stream:
                result = await client.send_message(text, self.document_id)
                if not result["success"]:
                    self.set_error(result["error"])
                    return result
                data = result["data"]
                if isinstance(data, dict) and data.get("session_id"):
                    self.set_session_id(str(data["session_id"]))
                self.add_assistant_message(_reply_text(data))
                return result

            reply = ""
            placeholder: Optional[ChatMessage] = None
            try:
                async for chunk in client.stream_message(text, self.document_id):
                    if placeholder is None:
                        placeholder = self.add_assistant_message("", {"streaming": True})
                    reply += chunk
                    self.update_last_message(reply)
            except ChatError as exc:
                self.set_error(str(exc))
                return {"success": False, "error": str(exc)}
            finally:
                if placeholder is not None:
                    placeholder.metadata.pop("streaming", None)
            if placeholder is None:
                self.add_assistant_message("")
            return {"success": True, "data": reply}
        finally:
            self.set_loading(False)
