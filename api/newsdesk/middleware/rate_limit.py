"""Rate limiting for the login endpoints using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Keyed by client IP; only the login routes are decorated
limiter = Limiter(key_func=get_remote_address)


def reset_limiter() -> None:
    """Reset the limiter storage. Used in tests to clear rate limit state."""
    limiter.reset()
