from __future__ import annotations

import asyncio

from mwplu.models import CompanyContext
from mwplu.services.db_service import DbService
from mwplu.stores import CompanyContextStore, ContextMode


def _payload(**overrides):
    payload = {
        "name": "MWPLU",
        "mission": "Rendre le PLU lisible",
        "values": ["clarté", "exactitude"],
        "tone": "pédagogique",
        "messaging": "Le PLU en clair",
        "brandVoiceGuidelines": "Phrases courtes",
        "isActive": True,
    }
    payload.update(overrides)
    return payload


def test_unconfigured_context_operations() -> None:
    service = DbService()

    assert service.get_active_company_context() == {"success": True, "data": None}
    saved = service.save_company_context(_payload())["data"]
    assert saved["id"] == "local-dev"
    assert saved["is_active"] is True
    assert saved["name"] == "MWPLU"


def test_saving_active_context_deactivates_previous(db_session, make_service, user) -> None:
    service = make_service(user)
    first = service.save_company_context(_payload(name="Première"))["data"]
    second = service.save_company_context(_payload(name="Seconde"))["data"]

    active = db_session.query(CompanyContext).filter(CompanyContext.is_active.is_(True)).all()
    assert [row.name for row in active] == ["Seconde"]
    assert second["created_by"] == str(user.id)
    assert second["brand_voice_guidelines"] == "Phrases courtes"
    assert service.get_active_company_context()["data"]["id"] == second["id"]
    assert first["id"] != second["id"]


def test_saving_inactive_context_keeps_active_one(db_session, make_service) -> None:
    service = make_service()
    active = service.save_company_context(_payload(name="Active"))["data"]
    service.save_company_context(_payload(name="Brouillon", isActive=False))

    assert service.get_active_company_context()["data"]["id"] == active["id"]
    assert db_session.query(CompanyContext).count() == 2


class _SlowService:
    """Async stand-in that yields control while saving."""

    def __init__(self, active=None):
        self.saves = []
        self.active = active

    async def get_active_company_context(self):
        return {"success": True, "data": self.active}

    async def save_company_context(self, payload):
        self.saves.append(payload)
        await asyncio.sleep(0.01)
        return {"success": True, "data": {"id": "ctx-1", **payload}}


def test_concurrent_saves_write_once() -> None:
    service = _SlowService()
    store = CompanyContextStore(service)
    store.set_field("name", "MWPLU")

    async def run():
        return await asyncio.gather(store.save_context(), store.save_context())

    first, second = asyncio.run(run())

    assert len(service.saves) == 1
    assert first["success"] is True
    assert second == {"success": False, "skipped": True}
    assert store.saving is False
    assert store.mode is ContextMode.VIEW


def test_store_save_failure_keeps_mode() -> None:
    class _FailingService(_SlowService):
        async def save_company_context(self, payload):
            return {"success": False, "error": "boom"}

    store = CompanyContextStore(_FailingService())
    store.start()

    result = asyncio.run(store.save_context())

    assert result == {"success": False, "error": "boom"}
    assert store.mode is ContextMode.EDIT
    assert store.saving is False


def test_store_load_and_cancel() -> None:
    store = CompanyContextStore(_SlowService(active={"name": "MWPLU", "values": ["a"], "is_active": True}))

    asyncio.run(store.load_active())
    assert store.mode is ContextMode.VIEW
    assert store.values == ["a"]

    store.start()
    store.cancel()
    assert store.mode is ContextMode.VIEW

    store.reset()
    store.start()
    store.cancel()
    assert store.mode is ContextMode.WELCOME


def test_store_without_active_context_shows_welcome() -> None:
    store = CompanyContextStore(_SlowService())

    asyncio.run(store.load_active())

    assert store.mode is ContextMode.WELCOME
    assert store.is_valid is False


def test_store_accepts_camel_case_fields() -> None:
    store = CompanyContextStore(_SlowService())
    store.set_field("brandVoiceGuidelines", "Direct")
    store.set_field("isActive", False)
    store.set_field("values", "not-a-list")
    store.set_field("unknown", "ignored")

    payload = store.payload()
    assert payload["brandVoiceGuidelines"] == "Direct"
    assert payload["isActive"] is False
    assert payload["values"] == []


def test_store_runs_sync_service_in_threadpool(db_session, make_service) -> None:
    store = CompanyContextStore(make_service())
    store.set_field("name", "Synchrone")

    result = asyncio.run(store.save_context())

    assert result["success"] is True
    assert result["data"]["name"] == "Synchrone"
