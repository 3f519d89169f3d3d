"""
Per-IP limiter for the authentication endpoints.

Uses slowapi (built on top of limits). This is separate from the submission
cooldown: it throttles anonymous login/register traffic by client address,
while the cooldown gate (app/services/cooldown.py) works per user through Redis.

The limiter is attached to `app.state.limiter` in main.py and disabled in
tests (see conftest.py).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATELIMIT_STORAGE_URI,
    enabled=True,
)
