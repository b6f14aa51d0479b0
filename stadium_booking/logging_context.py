"""Per-booking log correlation.

Every booking operation runs inside ``request_context(booking_id)``, so
the validator, store and notification logs it produces share the
booking's id. The id is injected by a filter on the root handlers (see
``config.load_config``) and rendered through ``LOG_FORMAT``; records
logged outside any booking operation show ``-``.

Usage:
    with request_context(booking.id):
        logger.info("Booking confirmed")   # ... [<booking id>]: Booking confirmed
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

NO_REQUEST = "-"

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s [%(request_id)s]: %(message)s"

_request_id: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST)


def get_request_id() -> str:
    return _request_id.get()


@contextmanager
def request_context(request_id: str) -> Iterator[str]:
    """Tag log records with ``request_id`` until the block exits.

    Contexts nest; the outer id is restored on exit, also on error.
    """
    token = _request_id.set(request_id)
    try:
        yield request_id
    finally:
        _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Sets ``record.request_id`` unless the record already carries one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def attach_request_filter(handler: logging.Handler) -> logging.Handler:
    """Install a ``RequestIdFilter`` on ``handler`` once.

    Handler-level so that records from every logger, including third
    party ones, can be rendered with ``LOG_FORMAT``.
    """
    if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
        handler.addFilter(RequestIdFilter())
    return handler
