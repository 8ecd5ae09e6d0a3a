from __future__ import annotations

import logging
from html import escape
from typing import Any, Mapping

from sqlalchemy import select

from ..models import City, Document, Typology, Zone, Zoning
from .base import Envelope, ServiceBase, as_uuid, ok, service_call

logger = logging.getLogger(__name__)

CONTENT_UNAVAILABLE = "Contenu non disponible"
CONTENT_FORMAT_ERROR = "Erreur lors du formatage du contenu"


def format_json_content(json_response: Any) -> str:
    """Render the chapter/section/rule JSON of a PLU synthesis as HTML."""
    if not json_response:
        return CONTENT_UNAVAILABLE

    try:
        parts = ['<div class="plu-content">']
        for chapter_key, chapter in json_response.items():
            chapter_label = escape(str(chapter_key).replace("chapitre_", "", 1))
            parts.append(f'<section class="chapter"><h2>Chapitre {chapter_label}</h2>')

            for section in chapter.values():
                if not isinstance(section, list) or not section:
                    continue
                for item in section:
                    if not item.get("titre"):
                        continue
                    parts.append(f'<div class="section"><h3>{escape(str(item["titre"]))}</h3>')
                    rules = item.get("regles")
                    if isinstance(rules, list):
                        parts.append('<div class="rules">')
                        for rule in rules:
                            parts.append(f'<div class="rule"><p>{escape(str(rule.get("contenu", "")))}</p>')
                            if rule.get("page_source"):
                                parts.append(f'<span class="source">({escape(str(rule["page_source"]))})</span>')
                            parts.append("</div>")
                        parts.append("</div>")
                    parts.append("</div>")

            parts.append("</section>")
        parts.append("</div>")
        return "".join(parts)
    except (AttributeError, TypeError) as exc:
        logger.error("Error formatting JSON content: %s", exc)
        return CONTENT_FORMAT_ERROR


def _name_or(obj: Any, fallback: str) -> str:
    return getattr(obj, "name", None) or fallback


class ZoningService(ServiceBase):
    @service_call("Error fetching cities")
    def get_cities(self) -> Envelope:
        rows = self.db.scalars(select(City).order_by(City.name)).all()
        return ok([row.as_dict() for row in rows])

    @service_call("Error fetching zonings")
    def get_zonings(self, city_id: Any) -> Envelope:
        rows = self.db.scalars(
            select(Zoning).where(Zoning.city_id == as_uuid(city_id, "city ID")).order_by(Zoning.name)
        ).all()
        return ok([row.as_dict() for row in rows])

    @service_call("Error fetching zones")
    def get_zones(self, zoning_id: Any) -> Envelope:
        rows = self.db.scalars(
            select(Zone).where(Zone.zoning_id == as_uuid(zoning_id, "zoning ID")).order_by(Zone.name)
        ).all()
        return ok([row.as_dict() for row in rows])

    @service_call("Error fetching typologies")
    def get_typologies(self) -> Envelope:
        rows = self.db.scalars(select(Typology).order_by(Typology.name)).all()
        return ok([row.as_dict() for row in rows])

    @service_call("Error fetching document")
    def get_document(self, zoning_id: Any, zone_id: Any) -> Envelope:
        document = self.db.scalars(
            select(Document).where(
                Document.zoning_id == as_uuid(zoning_id, "zoning ID"),
                Document.zone_id == as_uuid(zone_id, "zone ID"),
            )
        ).unique().one_or_none()
        if document is None:
            raise LookupError("Document not found")
        return ok(self.serialize_document(document))

    @staticmethod
    def serialize_document(document: Document) -> dict[str, Any]:
        data = document.as_dict()
        zoning = document.zoning
        city = zoning.city if zoning is not None else None

        content_json = document.content_json if isinstance(document.content_json, Mapping) else {}
        if document.html_content:
            synthesis = document.html_content
        elif content_json.get("response"):
            synthesis = format_json_content(content_json["response"])
        else:
            synthesis = CONTENT_UNAVAILABLE

        data.update(
            city_id=str(city.id) if city else None,
            city_name=_name_or(city, "Unknown City"),
            zoning_id=str(zoning.id) if zoning else None,
            zoning_name=_name_or(zoning, "Unknown Zoning"),
            zone_id=str(document.zone.id) if document.zone else None,
            zone_name=_name_or(document.zone, "Unknown Zone"),
            synthesis_content=synthesis,
            sources=[],
        )
        return data

    @service_call("Error searching documents")
    def search_documents(self, search_params: Mapping[str, Any]) -> Envelope:
        query = select(Document)
        if search_params.get("city_id"):
            query = query.where(Document.city_id == as_uuid(search_params["city_id"], "city ID"))
        if search_params.get("zoning_id"):
            query = query.where(Document.zoning_id == as_uuid(search_params["zoning_id"], "zoning ID"))
        if search_params.get("zone_id"):
            query = query.where(Document.zone_id == as_uuid(search_params["zone_id"], "zone ID"))
        if search_params.get("search_text"):
            query = query.where(Document.content.ilike(f"%{search_params['search_text']}%"))

        rows = self.db.scalars(query.order_by(Document.created_at.desc())).unique().all()
        results = []
        for row in rows:
            data = row.as_dict()
            data["city_name"] = row.city.name if row.city else None
            data["zoning_name"] = row.zoning.name if row.zoning else None
            data["zone_name"] = row.zone.name if row.zone else None
            results.append(data)
        return ok(results)
