"""SlowAPI limiter shared by main (app.state.limiter) and the write routes.

Requests are bucketed per acting user; anonymous callers fall back to the
client address.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from app.shared.context import get_current_actor_id

WRITE_ENDPOINT_LIMIT = "120/minute"
TRANSITION_LIMIT = "60/minute"


def actor_or_address(request: Request) -> str:
    actor_id = get_current_actor_id()
    if actor_id:
        return f"actor:{actor_id}"
    return f"addr:{get_remote_address(request)}"


limiter = Limiter(key_func=actor_or_address)

limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
limit_transitions = limiter.limit(TRANSITION_LIMIT)
