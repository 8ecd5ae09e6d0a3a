"""Shared plumbing for the service layer.

Every public service method returns an envelope, either
``{"success": True, "data": ...}`` or ``{"success": False, "error": "..."}``.
Exceptions never escape to callers: :func:`service_call` logs them and turns
them into failure envelopes.
"""

from __future__ import annotations

import functools
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional, TypeVar

from sqlalchemy.orm import Session

from .auth import AuthUser

logger = logging.getLogger(__name__)

Envelope = dict[str, Any]
F = TypeVar("F", bound=Callable[..., Envelope])

NOT_CONFIGURED_MESSAGE = (
    "Database is not configured. Set DATABASE_URL in .env or .env.local"
)


class BackendNotConfigured(RuntimeError):
    pass


NOT_AUTHENTICATED_CODE = "not_authenticated"


class ServiceError(Exception):
    """An error whose ``code`` is copied onto the failure envelope."""

    code: Optional[str] = None


class NotAuthenticated(ServiceError, PermissionError):
    code = NOT_AUTHENTICATED_CODE


def ok(data: Any = None, **extra: Any) -> Envelope:
    result: Envelope = {"success": True}
    if data is not None or not extra:
        result["data"] = data
    result.update(extra)
    return result


def fail(error: str, **extra: Any) -> Envelope:
    result: Envelope = {"success": False, "error": error}
    result.update({key: value for key, value in extra.items() if value is not None})
    return result


def service_call(message: str) -> Callable[[F], F]:
    """Catch, log and stringify any error raised by the wrapped operation."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(self: "ServiceBase", *args: Any, **kwargs: Any) -> Envelope:
            try:
                return func(self, *args, **kwargs)
            except Exception as exc:
                if self._session is not None:
                    self._session.rollback()
                logger.error("%s: %s", message, exc)
                code = exc.code if isinstance(exc, ServiceError) else None
                return fail(str(exc) or exc.__class__.__name__, code=code)

        return wrapper  # type: ignore[return-value]

    return decorator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_uuid(value: Any, label: str = "ID") -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid {label}: {value!r}") from exc


class ServiceBase:
    def __init__(
        self,
        session: Optional[Session] = None,
        user: Optional[AuthUser] = None,
        storage_factory: Optional[Callable[[], Any]] = None,
    ) -> None:
        self._session = session
        self.user = user
        self.storage_factory = storage_factory

    @property
    def is_configured(self) -> bool:
        return self._session is not None

    @property
    def db(self) -> Session:
        if self._session is None:
            raise BackendNotConfigured(NOT_CONFIGURED_MESSAGE)
        return self._session

    def get_user(self) -> Optional[AuthUser]:
        return self.user

    def require_user(self) -> AuthUser:
        if self.user is None:
            raise NotAuthenticated("User must be authenticated")
        return self.user

    def invoke_function(self, name: str, body: Optional[dict[str, Any]] = None) -> Any:
        from .functions import invoke

        return invoke(name, body, session=self._session, user=self.user, storage_factory=self.storage_factory)
