"""
Finite state machine for booking status changes.

Every status change a booking can undergo is listed explicitly with the
event that causes it. Handlers ask the machine before writing a new status,
so a cancelled or completed booking can never be confirmed again.

Usage:
    lifecycle = BookingLifecycle(BookingStatus.PENDING)
    lifecycle.transition(BookingEvent.CREDIT_CONSUMED)
    assert lifecycle.current_status == BookingStatus.CONFIRMED
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from booknpay.errors import InvalidTransitionError
from booknpay.schemas.booking_schema import BookingStatus
from booknpay.utils import InstantLike, parse_instant, utc_now

logger = logging.getLogger(__name__)


class BookingEvent(str, Enum):
    """Events that cause status changes."""
    CREDIT_CONSUMED = "credit_consumed"
    PAYMENT_SUCCEEDED = "payment_succeeded"
    RESCHEDULE = "reschedule"
    CANCEL = "cancel"
    COMPLETE = "complete"
    MARK_NO_SHOW = "mark_no_show"


@dataclass
class Transition:
    """A single valid status transition."""
    from_status: BookingStatus
    to_status: BookingStatus
    event: BookingEvent


@dataclass
class StatusEntry:
    """Recorded history entry for a status change."""
    status: BookingStatus
    entered_at: datetime
    event: Optional[BookingEvent] = None


TERMINAL_STATUSES = frozenset(
    {BookingStatus.CANCELLED, BookingStatus.COMPLETED, BookingStatus.NO_SHOW}
)


def _stamp(now: Optional[InstantLike]) -> datetime:
    return parse_instant(now) if now is not None else utc_now()


class BookingLifecycle:
    """
    Deterministic state machine over a single booking's status.

    Rescheduling keeps the current status; only the time window moves.
    """

    TRANSITIONS: list[Transition] = [
        # --- Confirmation ---
        Transition(BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingEvent.CREDIT_CONSUMED),
        Transition(BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingEvent.PAYMENT_SUCCEEDED),

        # --- Reschedule ---
        Transition(BookingStatus.PENDING, BookingStatus.PENDING, BookingEvent.RESCHEDULE),
        Transition(BookingStatus.CONFIRMED, BookingStatus.CONFIRMED, BookingEvent.RESCHEDULE),

        # --- Cancellation ---
        Transition(BookingStatus.PENDING, BookingStatus.CANCELLED, BookingEvent.CANCEL),
        Transition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingEvent.CANCEL),

        # --- Attendance ---
        Transition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED, BookingEvent.COMPLETE),
        Transition(BookingStatus.CONFIRMED, BookingStatus.NO_SHOW, BookingEvent.MARK_NO_SHOW),
    ]

    def __init__(
        self,
        status: BookingStatus = BookingStatus.PENDING,
        now: Optional[InstantLike] = None,
    ) -> None:
        self._current_status = BookingStatus(status)
        self._history: list[StatusEntry] = [
            StatusEntry(status=self._current_status, entered_at=_stamp(now))
        ]

    @property
    def current_status(self) -> BookingStatus:
        return self._current_status

    def transition(self, event: BookingEvent, now: Optional[InstantLike] = None) -> BookingStatus:
        """
        Apply an event to the booking.

        Args:
            event: The event causing the change.
            now: When the change happened; defaults to the current time.

        Returns:
            The new booking status.

        Raises:
            InvalidTransitionError: If the event is not allowed from the
                current status.
        """
        for t in self.TRANSITIONS:
            if t.from_status == self._current_status and t.event == event:
                old_status = self._current_status
                self._current_status = t.to_status
                self._history.append(StatusEntry(
                    status=self._current_status,
                    entered_at=_stamp(now),
                    event=event,
                ))
                logger.debug(
                    "Booking transition: %s -> %s (event: %s)",
                    old_status.value, self._current_status.value, event.value,
                )
                return self._current_status

        valid = [e.value for e in self.get_valid_events()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_status.value}' "
            f"with event '{event.value}'. Valid events: {valid}"
        )

    def can(self, event: BookingEvent) -> bool:
        return event in self.get_valid_events()

    def get_valid_events(self) -> list[BookingEvent]:
        """Return all events valid from the current status."""
        return [t.event for t in self.TRANSITIONS if t.from_status == self._current_status]

    def get_history(self) -> list[StatusEntry]:
        return list(self._history)

    def get_status_trace(self) -> list[str]:
        """Return ordered list of status names visited."""
        return [entry.status.value for entry in self._history]

    def is_terminal(self) -> bool:
        return self._current_status in TERMINAL_STATUSES
