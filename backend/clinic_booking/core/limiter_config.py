import os

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address


def is_rate_limit_enabled() -> bool:
    """RATE_LIMIT_ENABLED=0 turns limits off (tests, local scripts)."""
    return os.getenv("RATE_LIMIT_ENABLED", "true").lower().strip() in (
        "true",
        "1",
        "yes",
    )


# Global Limiter instance to be imported by controllers.
# main.create_app() calls init_app and sets RATELIMIT_ENABLED from the env.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200 per hour", "50 per minute"],
    storage_uri=os.getenv("LIMITER_STORAGE_URI", "memory://"),
)
