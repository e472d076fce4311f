from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# Shared limiter; routers may add stricter per-endpoint limits with @limiter.limit
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_per_minute}/minute"],
    enabled=settings.environment != "testing",
)
