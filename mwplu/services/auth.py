from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..config import settings

logger = logging.getLogger(__name__)


class AuthError(Exception):
    pass


@dataclass
class AuthUser:
    id: uuid.UUID
    email: Optional[str] = None
    user_metadata: dict[str, Any] = field(default_factory=dict)


class AuthService:
    """Issues and verifies signed access tokens for portal users."""

    def __init__(self, secret: str | None = None) -> None:
        self.serializer = URLSafeTimedSerializer(secret or settings.auth_secret, salt="access-token")

    def issue_token(self, user: AuthUser) -> str:
        token = self.serializer.dumps(
            {
                "user_id": str(user.id),
                "email": user.email,
                "user_metadata": dict(user.user_metadata or {}),
            }
        )
        logger.info("access_token_issued user_id=%s", user.id)
        return token

    def verify_token(self, token: str) -> AuthUser:
        try:
            payload = self.serializer.loads(token, max_age=settings.auth_token_ttl_hours * 3600)
        except SignatureExpired as exc:
            raise AuthError("Access token expired") from exc
        except BadSignature as exc:
            raise AuthError("Invalid access token") from exc

        try:
            user_id = uuid.UUID(payload["user_id"])
        except (KeyError, TypeError, ValueError) as exc:
            raise AuthError("Invalid access token") from exc

        return AuthUser(
            id=user_id,
            email=payload.get("email"),
            user_metadata=payload.get("user_metadata") or {},
        )
