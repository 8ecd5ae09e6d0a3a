from __future__ import annotations

import logging
import sys
import uuid
from typing import Any

from dotenv import load_dotenv

load_dotenv()

from mwplu.db.session import SessionLocal, is_configured
from mwplu.models import City, Document, Typology, Zone, Zoning
from mwplu.services.taxonomy import seed_blog_taxonomy

logger = logging.getLogger(__name__)

SEED_VERSION = "v1"


def seed_uuid(name: str) -> uuid.UUID:
    """Generate deterministic UUIDs scoped to the seed version."""
    return uuid.uuid5(uuid.NAMESPACE_URL, f"mwplu/{SEED_VERSION}/{name}")


DEMO_CONTENT: dict[str, Any] = {
    "response": {
        "chapitre_1": {
            "dispositions": [
                {
                    "titre": "Article UA 1 - Occupations interdites",
                    "regles": [
                        {"contenu": "Les constructions à usage industriel sont interdites.", "page_source": "p. 12"},
                        {"contenu": "Les entrepôts de plus de 500 m² sont interdits.", "page_source": "p. 12"},
                    ],
                },
            ],
        },
        "chapitre_2": {
            "volumetrie": [
                {
                    "titre": "Article UA 10 - Hauteur maximale",
                    "regles": [
                        {"contenu": "La hauteur maximale est fixée à 15 mètres à l'égout du toit.", "page_source": "p. 18"},
                    ],
                },
            ],
        },
    }
}


def seed_demo_catalogue(session) -> None:
    city = City(id=seed_uuid("city:grenoble"), name="Grenoble", insee_code="38185")
    zoning = Zoning(id=seed_uuid("zoning:grenoble-plui"), city_id=city.id, name="PLUi Grenoble-Alpes Métropole")
    zone = Zone(id=seed_uuid("zone:grenoble-ua"), zoning_id=zoning.id, name="UA")
    typology = Typology(id=seed_uuid("typology:habitat"), name="Habitat")
    document = Document(
        id=seed_uuid("document:grenoble-ua"),
        city_id=city.id,
        zoning_id=zoning.id,
        zone_id=zone.id,
        typology_id=typology.id,
        title="Synthèse PLU - Zone UA",
        content_json=DEMO_CONTENT,
        storage_key="documents/grenoble/ua.pdf",
    )
    for row in (city, zoning, zone, typology, document):
        session.merge(row)


def run_seed() -> None:
    session = SessionLocal()
    try:
        seed_demo_catalogue(session)
        session.flush()
        counts = seed_blog_taxonomy(session)
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

    logger.info("Seed applied (categories=%s tags=%s)", counts["categories"], counts["tags"])


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    if not is_configured():
        logger.error("DATABASE_URL is not set; nothing to seed")
        sys.exit(1)
    run_seed()
