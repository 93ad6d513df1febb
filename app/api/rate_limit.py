"""
Shared rate limiter.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings

limiter = Limiter(key_func=get_remote_address)

# Limit string applied to endpoints that proxy third-party services
PROXY_RATE_LIMIT = f"{settings.rate_limit_requests}/minute"
