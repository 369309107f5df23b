"""Shared rate limiter (in-memory storage).

Login and registration endpoints opt in with @limiter.limit(...). The
limiter is switched off when TESTING is set so suites can hammer the
auth endpoints.
"""

import os

from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled and not os.environ.get("TESTING"),
)
