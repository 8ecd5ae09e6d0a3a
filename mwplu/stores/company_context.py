"""Editing state for the company context used across blog authoring.

The store holds the form fields of the active context and a three-state
UI mode: ``welcome`` when no active record exists, ``edit`` while the
user is typing, ``view`` once a record is loaded or saved.
"""

from __future__ import annotations

import enum
import inspect
import logging
from typing import Any, Callable, Optional

from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)


class ContextMode(str, enum.Enum):
    WELCOME = "welcome"
    EDIT = "edit"
    VIEW = "view"


_TEXT_FIELDS = ("name", "mission", "tone", "messaging", "brand_voice_guidelines")
_FIELD_ALIASES = {"brandVoiceGuidelines": "brand_voice_guidelines", "isActive": "is_active"}


async def _call(func: Callable[..., Any], *args: Any) -> Any:
    if inspect.iscoroutinefunction(func):
        return await func(*args)
    return await run_in_threadpool(func, *args)


class CompanyContextStore:
    def __init__(self, service: Any) -> None:
        self.service = service
        self.mode = ContextMode.WELCOME
        self.saving = False
        self.reset()

    @property
    def is_valid(self) -> bool:
        return bool(self.name.strip())

    def set_field(self, field: str, value: Any) -> None:
        field = _FIELD_ALIASES.get(field, field)
        if field in _TEXT_FIELDS:
            setattr(self, field, value)
        elif field == "values":
            self.values = list(value) if isinstance(value, (list, tuple)) else []
        elif field == "is_active":
            self.is_active = bool(value)
        # unknown fields are ignored

    def reset(self) -> None:
        self.name = ""
        self.mission = ""
        self.values: list[str] = []
        self.tone = ""
        self.messaging = ""
        self.brand_voice_guidelines = ""
        self.is_active = True

    async def load_active(self) -> None:
        result = await _call(self.service.get_active_company_context)
        data: Optional[dict[str, Any]] = result.get("data") if result.get("success") else None
        if not data:
            self.mode = ContextMode.WELCOME
            return

        self.name = data.get("name") or ""
        self.mission = data.get("mission") or ""
        self.values = list(data["values"]) if isinstance(data.get("values"), list) else []
        self.tone = data.get("tone") or ""
        self.messaging = data.get("messaging") or ""
        self.brand_voice_guidelines = data.get("brand_voice_guidelines") or ""
        self.is_active = bool(data.get("is_active"))
        self.mode = ContextMode.VIEW

    def start(self) -> None:
        self.mode = ContextMode.EDIT

    def cancel(self) -> None:
        if self.mode is not ContextMode.EDIT:
            return
        has_data = any(getattr(self, field) for field in _TEXT_FIELDS)
        self.mode = ContextMode.VIEW if has_data else ContextMode.WELCOME

    def payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "mission": self.mission,
            "values": list(self.values),
            "tone": self.tone,
            "messaging": self.messaging,
            "brandVoiceGuidelines": self.brand_voice_guidelines,
            "isActive": self.is_active,
        }

    async def save_context(self) -> dict[str, Any]:
        # A save already in flight wins; this call does not queue behind it.
        if self.saving:
            return {"success": False, "skipped": True}

        self.saving = True
        try:
            result = await _call(self.service.save_company_context, self.payload())
            if not result.get("success"):
                raise RuntimeError(result.get("error") or "Save failed")
            self.mode = ContextMode.VIEW
            return {"success": True, "data": result.get("data")}
        except Exception as exc:
            logger.error("Error saving company context: %s", exc)
            return {"success": False, "error": str(exc)}
        finally:
            self.saving = False
