"""Rate limit bucketing."""

from starlette.requests import Request

from app.core.limiter import actor_or_address
from app.shared.context import clear_current_actor, set_current_actor


def _request() -> Request:
    return Request({"type": "http", "headers": [], "client": ("10.0.0.5", 4321)})


def test_anonymous_requests_keyed_by_address() -> None:
    clear_current_actor()
    assert actor_or_address(_request()) == "addr:10.0.0.5"


def test_known_actor_keyed_by_id() -> None:
    set_current_actor("u-9", role_keys={"Writer"})
    try:
        assert actor_or_address(_request()) == "actor:u-9"
    finally:
        clear_current_actor()
