"""Request correlation for booking decision logs.

Entry points that act on one booking (confirmation, cancellation,
reschedule) bind the booking id for the duration of the call, so every
record emitted underneath, from slot resolution down to the ledger, carries
the same ``request_id``. A caller that already bound its own id (an HTTP
request id, say) keeps it.

Usage:
    from booknpay.logging_context import install_request_handler, request_scope

    install_request_handler()
    with request_scope("REQ-abc123"):
        plan = plan_cancellation(booking, 12)  # logged as [REQ-abc123]
"""

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional, TextIO

NO_REQUEST_ID = "-"
REQUEST_LOG_FORMAT = "%(asctime)s [%(name)s] [%(request_id)s] %(levelname)s: %(message)s"

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> str:
    return _request_id.get() or NO_REQUEST_ID


@contextmanager
def request_scope(request_id: str) -> Iterator[str]:
    """Bind ``request_id`` unless an outer scope already bound one.

    Yields the id in effect inside the block.
    """
    current = _request_id.get()
    if current is not None:
        yield current
        return

    token = _request_id.set(request_id)
    try:
        yield request_id
    finally:
        _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()  # type: ignore[attr-defined]
        return True


def install_request_handler(
    logger_name: str = "booknpay",
    level: Optional[int] = None,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """Route ``logger_name`` records to a stream with the request id rendered.

    The filter sits on the handler, so every record it formats has a
    ``request_id`` whichever module logged it. Records stop at this logger
    instead of also reaching the root handler.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(REQUEST_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    logger = logging.getLogger(logger_name)
    logger.addHandler(handler)
    logger.propagate = False
    if level is not None:
        logger.setLevel(level)
    return handler
