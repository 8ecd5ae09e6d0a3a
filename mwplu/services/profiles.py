from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from sqlalchemy import select

from ..db.upsert import upsert
from ..models import Profile
from .auth import AuthUser
from .base import Envelope, ServiceBase, as_uuid, ok, service_call, utcnow

logger = logging.getLogger(__name__)

_PROFILE_FIELDS = {"email", "full_name", "pseudo", "avatar_url", "download_bonus"}


class ProfileService(ServiceBase):
    @service_call("Error fetching user profile")
    def get_user_profile(self, user_id: Any) -> Envelope:
        if not user_id:
            raise ValueError("User ID is required")
        profile = self.db.get(Profile, as_uuid(user_id, "user ID"))
        return ok(profile.as_dict() if profile else None)

    @service_call("Error updating user profile")
    def update_user_profile(self, user_id: Any, profile_data: Mapping[str, Any] | None) -> Envelope:
        if not user_id or not profile_data:
            raise ValueError("User ID and profile data are required")

        unknown = set(profile_data) - _PROFILE_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")

        (profile,) = upsert(
            self.db,
            Profile,
            {"id": as_uuid(user_id, "user ID"), **dict(profile_data), "updated_at": utcnow()},
            conflict_columns=("id",),
        )
        data = profile.as_dict()
        self.db.commit()
        return ok(data)

    @service_call("Error ensuring user profile")
    def ensure_user_profile(self, user: AuthUser | None) -> Envelope:
        if user is None or not getattr(user, "id", None):
            raise ValueError("User object is required")

        existing = self.db.get(Profile, user.id)
        if existing is not None:
            return ok(existing.as_dict(), created=False)

        metadata = user.user_metadata or {}
        now = utcnow()
        profile = Profile(
            id=user.id,
            email=user.email,
            full_name=metadata.get("full_name") or None,
            avatar_url=metadata.get("avatar_url") or None,
            created_at=now,
            updated_at=now,
        )
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        logger.info("profile_created user_id=%s", user.id)
        return ok(profile.as_dict(), created=True)

    @service_call("Error fetching profiles by IDs")
    def get_profiles_by_ids(self, user_ids: Iterable[Any] | None) -> Envelope:
        if not isinstance(user_ids, (list, tuple, set)) or not user_ids:
            return ok([])

        unique_ids = list(dict.fromkeys(as_uuid(user_id, "user ID") for user_id in user_ids if user_id))
        if not unique_ids:
            return ok([])

        rows = self.db.scalars(select(Profile).where(Profile.id.in_(unique_ids))).all()
        return ok([row.as_dict("id", "pseudo", "full_name") for row in rows])
