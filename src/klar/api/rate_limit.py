"""
Rate limiting for endpoints that call the AI provider.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

AI_RATE_LIMIT = "10/minute"

# Module level so routes can use it in decorators
limiter = Limiter(key_func=get_remote_address)
