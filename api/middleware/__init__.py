from .auth import get_role_from_request, require_role
from .logging import RequestLoggingMiddleware
from .rate_limiting import RateLimitMiddleware

__all__ = ["get_role_from_request", "require_role", "RequestLoggingMiddleware", "RateLimitMiddleware"]
