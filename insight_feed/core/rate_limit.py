"""
Rate Limiting

Shared slowapi limiter for endpoints that spend API quota or touch git.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from ..config import get_settings

settings = get_settings()

limiter = Limiter(key_func=get_remote_address)

WRITE_LIMIT = f"{settings.rate_limit_per_minute}/minute"
