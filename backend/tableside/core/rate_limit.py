"""Shared rate limiter instance for use across route files."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from tableside.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

# Customer-facing writes (orders, service calls) get a tighter budget than reads
READ_LIMIT = "120/minute"
WRITE_LIMIT = "30/minute"
