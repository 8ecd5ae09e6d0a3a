from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy import select, update

from ..models import CompanyContext
from .base import Envelope, ServiceBase, ok, service_call, utcnow

logger = logging.getLogger(__name__)


class CompanyContextService(ServiceBase):
    def get_active_company_context(self) -> Envelope:
        if not self.is_configured:
            return ok(None)
        return self._get_active_company_context()

    @service_call("Error fetching active company context")
    def _get_active_company_context(self) -> Envelope:
        row = self.db.scalars(
            select(CompanyContext)
            .where(CompanyContext.is_active.is_(True))
            .order_by(CompanyContext.updated_at.desc())
            .limit(1)
        ).first()
        return ok(row.as_dict() if row else None)

    def save_company_context(self, context: Mapping[str, Any]) -> Envelope:
        if not self.is_configured:
            now = utcnow().isoformat()
            logger.info("save_company_context: database not configured, returning simulated row")
            return ok(
                {
                    "id": "local-dev",
                    **dict(context),
                    "is_active": bool(context.get("isActive")),
                    "created_at": now,
                    "updated_at": now,
                }
            )
        return self._save_company_context(context)

    @service_call("Error saving company context")
    def _save_company_context(self, context: Mapping[str, Any]) -> Envelope:
        now = utcnow()
        values = context.get("values")
        user = self.get_user()
        row = CompanyContext(
            name=context.get("name") or "",
            mission=context.get("mission") or None,
            values=list(values) if isinstance(values, (list, tuple)) else [],
            tone=context.get("tone") or None,
            messaging=context.get("messaging") or None,
            brand_voice_guidelines=context.get("brandVoiceGuidelines") or None,
            is_active=bool(context.get("isActive")),
            created_by=user.id if user else None,
            created_at=now,
            updated_at=now,
        )

        # Deactivation and insert share one transaction; concurrent writers can still both commit.
        if row.is_active:
            self.db.execute(
                update(CompanyContext).where(CompanyContext.is_active.is_(True)).values(is_active=False)
            )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info("company_context_saved id=%s active=%s", row.id, row.is_active)
        return ok(row.as_dict())
