from .blog import (
    BlogAnalyticsEvent,
    BlogArticle,
    BlogArticleStatusEnum,
    BlogArticleTag,
    BlogCategory,
    BlogSeoAudit,
    BlogTag,
)
from .company_context import CompanyContext
from .contact import ContactMessage, ResearchHistory
from .engagement import Comment, DeletedComment, Download, Rating
from .profiles import Profile
from .zoning import City, Document, Typology, Zone, Zoning
