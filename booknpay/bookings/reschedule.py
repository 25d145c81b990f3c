"""Reschedule planning: move a live booking onto another free slot."""

import logging
from datetime import tzinfo
from typing import Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict

from booknpay.bookings.cancellation import append_note
from booknpay.bookings.lifecycle import BookingEvent, BookingLifecycle
from booknpay.logging_context import request_scope
from booknpay.scheduling.availability import OccupiedInterval, resolve_requested_slot
from booknpay.schemas.availability_schema import (
    AvailabilityRule,
    AvailabilitySlot,
    BlackoutDate,
)
from booknpay.schemas.booking_schema import Booking, BookingStatus
from booknpay.utils import InstantLike, parse_instant, utc_now

logger = logging.getLogger(__name__)


class ReschedulePlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    booking_id: str
    status: BookingStatus
    slot: AvailabilitySlot
    notes: Optional[str] = None
    fee_cents: int = 0


def _is_own_window(existing: OccupiedInterval, booking: Booking) -> bool:
    """Rows with an id match on id; anonymous windows match on the exact interval."""
    existing_id = getattr(existing, "id", None)
    if existing_id is not None:
        return existing_id == booking.id
    return existing.start_at == booking.start_at and existing.end_at == booking.end_at


def plan_reschedule(
    booking: Booking,
    new_start_at: InstantLike,
    rules: Iterable[AvailabilityRule],
    blackout_dates: Iterable[BlackoutDate],
    service_duration_min: int,
    existing_bookings: Iterable[OccupiedInterval],
    note: Optional[str] = None,
    reschedule_fee_cents: int = 0,
    charge_customer_fee: bool = False,
    now: Optional[InstantLike] = None,
    tz: Union[tzinfo, str, None] = None,
) -> ReschedulePlan:
    """
    Validate a move to ``new_start_at`` and return the new window.

    The booking's own current window never blocks the move, whether it is
    passed as the full ``Booking`` or as a ``BookingWindow``.

    Raises:
        InvalidTransitionError: If the booking is not pending or confirmed.
        SlotUnavailableError: If the new start is not bookable.
    """
    with request_scope(booking.id):
        reference = parse_instant(now) if now is not None else utc_now()
        status = BookingLifecycle(booking.status, now=reference).transition(
            BookingEvent.RESCHEDULE, now=reference
        )

        others = [
            existing for existing in existing_bookings
            if not _is_own_window(existing, booking)
        ]
        slot = resolve_requested_slot(
            new_start_at,
            rules,
            blackout_dates,
            service_duration_min,
            others,
            now=reference,
            tz=tz,
        )

        fee_cents = reschedule_fee_cents if charge_customer_fee and reschedule_fee_cents > 0 else 0
        notes = append_note(booking.notes, f"Reschedule note: {note}") if note else None

        logger.info("Reschedule planned for booking %s to %s", booking.id, slot.start.isoformat())
        return ReschedulePlan(
            booking_id=booking.id,
            status=status,
            slot=slot,
            notes=notes,
            fee_cents=fee_cents,
        )
