"""Domain error kinds raised by the booking core.

Every error is a local, recoverable business-rule failure. Each carries a
stable ``code`` so callers can map it to their own response format.
"""

from typing import Optional


class BookingCoreError(Exception):
    """Base class for all booking core failures."""

    code = "BOOKING_CORE_ERROR"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.code)


class InvalidInputError(BookingCoreError):
    """A date, time or numeric argument could not be interpreted."""

    code = "INVALID_INPUT"


class InvalidTopupAmountError(BookingCoreError):
    """Top-up credits must be a positive whole number."""

    code = "INVALID_TOPUP_CREDITS"


class InsufficientCreditsError(BookingCoreError):
    """The wallet has no credit left to consume."""

    code = "INSUFFICIENT_CREDITS"


class SlotUnavailableError(BookingCoreError):
    """The requested start time is not in the filtered availability list."""

    code = "SLOT_UNAVAILABLE"

    def __init__(self, reason: str = "SLOT_UNAVAILABLE", message: Optional[str] = None) -> None:
        self.reason = reason
        super().__init__(message or reason)


class InvalidTransitionError(BookingCoreError):
    """Raised when a booking status change is not valid from the current status."""

    code = "UNSUPPORTED_STATUS"
