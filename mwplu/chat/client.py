from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Optional

import httpx

from ..config import settings

logger = logging.getLogger(__name__)

EMPTY_MESSAGE_ERROR = "Le message ne peut pas être vide"
MISSING_DOCUMENT_ERROR = "ID du document manquant"
SEND_ERROR = "Erreur lors de l'envoi du message"


class ChatError(Exception):
    pass


def _validation_error(message: str, document_id: Any) -> Optional[str]:
    if not message or not message.strip():
        return EMPTY_MESSAGE_ERROR
    if not document_id:
        return MISSING_DOCUMENT_ERROR
    return None


def _error_message(response: httpx.Response | None) -> str:
    if response is None:
        return SEND_ERROR
    try:
        body = response.json()
    except ValueError:
        return SEND_ERROR
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return SEND_ERROR


class AiChatClient:
    """Talks to the document-chat webhook, as JSON or as a text stream."""

    def __init__(
        self,
        webhook_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.webhook_url = webhook_url or settings.chat_webhook_url
        self.timeout = timeout if timeout is not None else settings.chat_timeout_seconds
        self._transport = transport
        self.is_loading = False
        self.error: Optional[str] = None

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def send_message(self, message: str, document_id: Any) -> dict[str, Any]:
        invalid = _validation_error(message, document_id)
        if invalid:
            self.error = invalid
            return {"success": False, "error": invalid}

        self.is_loading = True
        self.error = None
        try:
            async with self._client() as client:
                response = await client.post(
                    self.webhook_url,
                    json={"message": message.strip(), "document_id": str(document_id)},
                )
                response.raise_for_status()
            try:
                data: Any = response.json()
            except ValueError:
                data = response.text
            return {"success": True, "data": data}
        except httpx.HTTPError as exc:
            logger.error("Error sending message to webhook: %s", exc)
            response = exc.response if isinstance(exc, httpx.HTTPStatusError) else None
            self.error = _error_message(response)
            return {"success": False, "error": self.error}
        finally:
            self.is_loading = False

    async def stream_message(self, message: str, document_id: Any) -> AsyncIterator[str]:
        """Yield reply text as the webhook streams it. Raises :class:`ChatError`."""
        invalid = _validation_error(message, document_id)
        if invalid:
            self.error = invalid
            raise ChatError(invalid)

        self.is_loading = True
        self.error = None
        try:
            async with self._client() as client:
                async with client.stream(
                    "POST",
                    self.webhook_url,
                    json={"message": message.strip(), "document_id": str(document_id), "stream": True},
                ) as response:
                    if response.is_error:
                        await response.aread()
                        self.error = _error_message(response)
                        raise ChatError(self.error)
                    async for chunk in response.aiter_text():
                        if chunk:
                            yield chunk
        except httpx.HTTPError as exc:
            logger.error("Error streaming message from webhook: %s", exc)
            self.error = SEND_ERROR
            raise ChatError(SEND_ERROR) from exc
        finally:
            self.is_loading = False
