# Rate limiting for the task tracker API (slowapi, keyed by client IP)

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

RATE_LIMITS = {
    # Credential checks are the only endpoints worth guarding against brute force
    "auth_operations": "20/minute",
    "register_operations": "10/minute",
}

__all__ = ["limiter", "RATE_LIMITS"]
