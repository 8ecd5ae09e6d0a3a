from fastapi import APIRouter

from ..db.session import is_configured

router = APIRouter()


@router.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True, "database_configured": is_configured()}


@router.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}
