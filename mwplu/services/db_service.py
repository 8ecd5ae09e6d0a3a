from __future__ import annotations

from .blog import BlogService
from .company_context import CompanyContextService
from .contact import ContactService
from .engagement import EngagementService
from .zoning import ZoningService, format_json_content


class DbService(
    CompanyContextService,
    ZoningService,
    EngagementService,
    ContactService,
    BlogService,
):
    """One method per query over the portal's relational store.

    Construct with a SQLAlchemy session (``None`` when ``DATABASE_URL`` is
    unset) and the authenticated user, if any. Every method returns an
    envelope and never raises.
    """

    format_json_content = staticmethod(format_json_content)
