from .logging import ACCESS_LOGGER_NAME, RequestLoggingMiddleware
