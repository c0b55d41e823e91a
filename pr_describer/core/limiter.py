from slowapi import Limiter
from slowapi.util import get_remote_address

WEBHOOK_RATE_LIMIT = "60/minute"

limiter = Limiter(key_func=get_remote_address)
