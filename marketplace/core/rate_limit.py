"""
Rate limiting configuration using slowapi.

Uses Redis as the backend so limits are shared across workers.
Webhook callers are identified by IP; the endpoints are unauthenticated.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from marketplace.core.config import settings


limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.redis_url,
    strategy="fixed-window",
)

# Pre-defined rate limit strings for use in route decorators:
#   @limiter.limit(RATE_WEBHOOK)
RATE_WEBHOOK = "120/minute"      # database webhooks fire once per inserted row
RATE_ADMIN = "6/minute"          # full-table sweeps
RATE_DEFAULT = "60/minute"       # listing and availability endpoints
