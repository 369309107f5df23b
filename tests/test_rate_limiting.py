"""
tests/test_rate_limiting.py — Tests for rate limiting behavior

Covers: slowapi limiter configuration, the TESTING switch, the limits
attached to login/registration, and the 429 envelope.

Called by: pytest
Depends on: app.rate_limit, app.main (RateLimitExceeded handler)
"""

import os


def test_limiter_is_configured():
    """Rate limiter module exports a Limiter with key_func."""
    from app.rate_limit import limiter
    assert limiter is not None
    assert limiter._key_func is not None


def test_limiter_uses_remote_address():
    """Key function is get_remote_address (IP-based limiting)."""
    from slowapi.util import get_remote_address
    from app.rate_limit import limiter
    assert limiter._key_func is get_remote_address


def test_rate_limit_disabled_in_test_mode():
    """In TESTING mode the limiter is switched off."""
    from app.rate_limit import limiter
    assert os.environ.get("TESTING") == "1"
    assert limiter.enabled is False


def test_login_can_be_hammered_in_tests(client, seller):
    body = {"username": "patnasteel", "password": "wrong-pass", "role": "Seller"}
    for _ in range(15):
        assert client.post("/api/auth/login", json=body).status_code == 401


def test_default_limits_from_settings():
    from app.config import settings
    assert settings.rate_limit_login == "10/minute"
    assert settings.rate_limit_register == "5/minute"


def test_rate_limit_handler_registered():
    from slowapi.errors import RateLimitExceeded
    from app.main import app
    assert RateLimitExceeded in app.exception_handlers
