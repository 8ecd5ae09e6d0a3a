from __future__ import annotations

import uuid

from mwplu.models import ContactMessage, Profile, ResearchHistory
from mwplu.services.contact import CONTACT_CONFIRMATION


def test_ensure_profile_is_idempotent(db_session, make_service, user) -> None:
    service = make_service(user)

    created = service.ensure_user_profile(user)
    again = service.ensure_user_profile(user)

    assert created["created"] is True
    assert created["data"]["full_name"] == "Camille Owner"
    assert again["created"] is False
    assert db_session.query(Profile).count() == 1


def test_ensure_profile_requires_user(make_service) -> None:
    assert make_service().ensure_user_profile(None) == {"success": False, "error": "User object is required"}


def test_update_profile_upserts(db_session, make_service, user) -> None:
    service = make_service(user)

    created = service.update_user_profile(user.id, {"pseudo": "camille"})["data"]
    updated = service.update_user_profile(str(user.id), {"full_name": "Camille D."})["data"]

    assert created["pseudo"] == "camille"
    assert updated["full_name"] == "Camille D."
    assert updated["pseudo"] == "camille"
    assert db_session.query(Profile).count() == 1


def test_update_profile_rejects_unknown_fields(make_service, user) -> None:
    result = make_service(user).update_user_profile(user.id, {"role": "admin"})

    assert result == {"success": False, "error": "Unknown profile fields: role"}


def test_update_profile_requires_data(make_service, user) -> None:
    result = make_service(user).update_user_profile(user.id, {})

    assert result["success"] is False


def test_get_profile(db_session, make_service, user) -> None:
    service = make_service(user)
    assert service.get_user_profile(user.id) == {"success": True, "data": None}

    service.ensure_user_profile(user)
    assert service.get_user_profile(str(user.id))["data"]["email"] == "owner@example.com"


def test_profiles_by_ids(db_session, make_service, user, other_user) -> None:
    service = make_service()
    service.ensure_user_profile(user)
    service.ensure_user_profile(other_user)

    rows = service.get_profiles_by_ids([str(user.id), str(user.id), None, str(uuid.uuid4())])["data"]

    assert [row["id"] for row in rows] == [str(user.id)]
    assert set(rows[0]) == {"id", "pseudo", "full_name"}
    assert service.get_profiles_by_ids(None) == {"success": True, "data": []}
    assert service.get_profiles_by_ids([]) == {"success": True, "data": []}


def test_submit_contact(db_session, make_service) -> None:
    result = make_service().submit_contact("Alex", "alex@example.com", "Bonjour")

    assert result == {"success": True, "message": CONTACT_CONFIRMATION}
    assert db_session.query(ContactMessage).one().email == "alex@example.com"


def test_log_research_history(catalogue, db_session, make_service, user) -> None:
    result = make_service(user).log_research_history(
        {
            "city_id": str(catalogue["city"].id),
            "address_input": "1 place Grenette",
            "geo_lon": 5.7245,
            "geo_lat": "45.19",
            "zone_label": "",
            "success": 1,
        }
    )

    assert result == {"success": True, "data": None}
    row = db_session.query(ResearchHistory).one()
    assert row.user_id == user.id
    assert row.city_id == catalogue["city"].id
    assert row.geo_lon == 5.7245
    assert row.geo_lat is None
    assert row.zone_label is None
    assert row.success is True


def test_log_research_history_anonymous(db_session, make_service) -> None:
    assert make_service().log_research_history({"success": False})["success"] is True
    assert db_session.query(ResearchHistory).one().user_id is None
