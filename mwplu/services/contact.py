from __future__ import annotations

from typing import Any, Mapping

from ..models import ContactMessage, ResearchHistory
from .base import Envelope, ServiceBase, as_uuid, ok, service_call, utcnow

CONTACT_CONFIRMATION = "Your message has been sent successfully!"


def _number_or_none(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


class ContactService(ServiceBase):
    @service_call("Error submitting contact form")
    def submit_contact(self, name: str, email: str, message: str) -> Envelope:
        self.db.add(ContactMessage(name=name, email=email, message=message, created_at=utcnow()))
        self.db.commit()
        return ok(message=CONTACT_CONFIRMATION)

    @service_call("Error logging research history")
    def log_research_history(self, entry: Mapping[str, Any]) -> Envelope:
        user = self.get_user()
        city_id = entry.get("city_id")
        self.db.add(
            ResearchHistory(
                user_id=user.id if user else None,
                city_id=as_uuid(city_id, "city ID") if city_id else None,
                address_input=entry.get("address_input") or None,
                geo_lon=_number_or_none(entry.get("geo_lon")),
                geo_lat=_number_or_none(entry.get("geo_lat")),
                zone_label=entry.get("zone_label") or None,
                success=bool(entry.get("success")),
                reason=entry.get("reason") or None,
                created_at=utcnow(),
            )
        )
        self.db.commit()
        return ok()
