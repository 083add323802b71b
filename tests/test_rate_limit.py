"""
tests/test_rate_limit.py -- The 429 response and its Retry-After header.
"""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

from limits import parse
from slowapi.errors import RateLimitExceeded

from api.main import _retry_after_seconds, rate_limit_handler


def _exceeded(limit_string: str) -> RateLimitExceeded:
    return RateLimitExceeded(SimpleNamespace(limit=parse(limit_string), error_message=None))


def test_retry_after_matches_the_limit_window():
    assert _retry_after_seconds(_exceeded("10/minute")) == 60
    assert _retry_after_seconds(_exceeded("5/hour")) == 3600
    assert _retry_after_seconds(_exceeded("2/second")) == 1


def test_retry_after_without_limit_details_falls_back_to_a_minute():
    assert _retry_after_seconds(SimpleNamespace()) == 60


def test_handler_returns_429_envelope_with_retry_after():
    resp = asyncio.run(rate_limit_handler(None, _exceeded("5/hour")))
    assert resp.status_code == 429
    assert resp.body == b'{"error":"Too many requests."}'
    assert resp.headers["Retry-After"] == "3600"
