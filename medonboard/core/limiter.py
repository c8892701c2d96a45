"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

WRITE_ENDPOINT_LIMIT = "120/minute"
ADJUDICATION_LIMIT = "60/minute"
SEED_LIMIT = "5/minute"

limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
limit_adjudication = limiter.limit(ADJUDICATION_LIMIT)
limit_seed = limiter.limit(SEED_LIMIT)
