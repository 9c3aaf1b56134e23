"""Logging setup: stdout, one line per record, tagged with actor and request id."""

import logging
import sys

from app.core.config import get_settings
from app.shared.context import get_current_actor_id, get_request_id

LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s "
    "[actor=%(actor_id)s request=%(request_id)s] %(message)s"
)


class ActorContextFilter(logging.Filter):
    """Copy the acting user and request id from contextvars onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.actor_id = get_current_actor_id() or "-"
        record.request_id = get_request_id() or "-"
        return True


def setup_logging() -> None:
    """Install the stdout handler on the root logger (DEBUG when settings.debug)."""
    level = logging.DEBUG if get_settings().debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(ActorContextFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=level, handlers=[handler], force=True)
    # SQL echo is controlled by settings.database_echo, not the root level.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
