from .company_context import CompanyContextStore, ContextMode
