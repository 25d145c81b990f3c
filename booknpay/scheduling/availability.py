"""
Slot generation and filtering for a single provider.

Recurring weekly rules are expanded into concrete dated windows, split into
fixed-duration slots, and then filtered against bookings that already hold
their time. Everything here is a pure function of its inputs: rules,
blackouts and bookings arrive as plain data from the caller, and the
reference instant is passed in rather than read from a global clock.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterable, Iterator, Optional, Protocol, TypedDict, Union
from zoneinfo import ZoneInfo

from booknpay.config import settings
from booknpay.errors import InvalidInputError, SlotUnavailableError
from booknpay.schemas.availability_schema import (
    AvailabilityRule,
    AvailabilitySlot,
    BlackoutDate,
)
from booknpay.schemas.booking_schema import BLOCKING_STATUSES, BookingStatus
from booknpay.utils import InstantLike, parse_instant, utc_now

logger = logging.getLogger(__name__)

DEFAULT_LOOKAHEAD_DAYS = settings.scheduling.default_lookahead_days
MAX_DATES_RETURNED = 5


class OccupiedInterval(Protocol):
    """Anything with a booking's interval and status (Booking, BookingWindow).

    An ``id`` attribute, when present, lets reschedules skip the moving booking.
    """

    start_at: datetime
    end_at: datetime
    status: Union[BookingStatus, str]


class DateAvailability(TypedDict):
    """Summary of availability for a single date."""

    date: str
    day_name: str
    slot_count: int


def _resolve_timezone(tz: Union[tzinfo, str, None]) -> tzinfo:
    name = settings.scheduling.timezone if tz is None else tz
    if isinstance(name, tzinfo):
        return name
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (KeyError, ValueError):
        raise InvalidInputError(f"Unknown timezone: {name!r}") from None


def _require_positive_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidInputError(f"{name} must be a positive integer, got {value!r}")
    return value


def _sunday_based_weekday(day: date) -> int:
    """Weekday number with 0 = Sunday, matching AvailabilityRule.day_of_week."""
    return (day.weekday() + 1) % 7


def _window_slots(
    day: date,
    rule: AvailabilityRule,
    step: timedelta,
    not_before: datetime,
    zone: tzinfo,
) -> Iterator[AvailabilitySlot]:
    window_start = datetime.combine(day, rule.start_time, tzinfo=zone).astimezone(timezone.utc)
    window_end = datetime.combine(day, rule.end_time, tzinfo=zone).astimezone(timezone.utc)

    cursor = window_start
    while cursor + step <= window_end:
        if cursor >= not_before:
            yield AvailabilitySlot(start=cursor, end=cursor + step)
        cursor += step


def generate_bookable_slots(
    rules: Iterable[AvailabilityRule],
    blackout_dates: Iterable[BlackoutDate],
    service_duration_min: int,
    from_: Optional[InstantLike] = None,
    lookahead_days: Optional[int] = None,
    tz: Union[tzinfo, str, None] = None,
) -> list[AvailabilitySlot]:
    """
    Expand weekly rules into concrete slots for the coming days.

    Args:
        rules: Availability rules for one provider.
        blackout_dates: Dates on which the provider takes no bookings.
        service_duration_min: Slot length in minutes.
        from_: Reference instant. Defaults to now. Slots starting before it
            are skipped.
        lookahead_days: Number of calendar days to cover, starting with the
            day containing ``from_``.
        tz: Timezone the rules' wall-clock times are expressed in.

    Returns:
        Slots ordered by day, then rule order, then start time. Overlapping
        rules on the same weekday each contribute their own slots; nothing
        is merged.

    Raises:
        InvalidInputError: If duration or lookahead is not a positive integer,
            or ``from_`` cannot be parsed.
    """
    duration = _require_positive_int("service_duration_min", service_duration_min)
    lookahead = _require_positive_int(
        "lookahead_days", DEFAULT_LOOKAHEAD_DAYS if lookahead_days is None else lookahead_days
    )
    start = parse_instant(from_) if from_ is not None else utc_now()
    zone = _resolve_timezone(tz)

    rules = list(rules)
    blacked_out = {blackout.day for blackout in blackout_dates}
    step = timedelta(minutes=duration)
    first_day = start.astimezone(zone).date()

    slots: list[AvailabilitySlot] = []
    for offset in range(lookahead):
        day = first_day + timedelta(days=offset)
        if day in blacked_out:
            logger.debug("Skipping blackout date %s", day.isoformat())
            continue

        weekday = _sunday_based_weekday(day)
        for rule in rules:
            if rule.day_of_week == weekday:
                slots.extend(_window_slots(day, rule, step, start, zone))

    logger.debug(
        "Generated %d slots over %d days from %s (%d min each)",
        len(slots), lookahead, start.isoformat(), duration,
    )
    return slots


def filter_slots_by_bookings(
    slots: Iterable[AvailabilitySlot],
    existing_bookings: Iterable[OccupiedInterval],
    now: Optional[InstantLike] = None,
) -> list[AvailabilitySlot]:
    """
    Drop slots that collide with live bookings or have already ended.

    Only pending and confirmed bookings block a slot. A slot that has
    started but not yet ended is kept unless a booking overlaps it.
    Surviving slots keep their input order.
    """
    reference = parse_instant(now) if now is not None else utc_now()

    occupied = [
        (parse_instant(booking.start_at), parse_instant(booking.end_at))
        for booking in existing_bookings
        if BookingStatus(booking.status) in BLOCKING_STATUSES
    ]

    available = [
        slot
        for slot in slots
        if slot.end > reference
        and not any(slot.overlaps(start_at, end_at) for start_at, end_at in occupied)
    ]
    logger.debug(
        "%d slots remain after filtering against %d occupied intervals",
        len(available), len(occupied),
    )
    return available


def resolve_requested_slot(
    requested_start: InstantLike,
    rules: Iterable[AvailabilityRule],
    blackout_dates: Iterable[BlackoutDate],
    service_duration_min: int,
    existing_bookings: Iterable[OccupiedInterval],
    now: Optional[InstantLike] = None,
    tz: Union[tzinfo, str, None] = None,
) -> AvailabilitySlot:
    """
    Find the bookable slot starting exactly at ``requested_start``.

    Used by booking creation and rescheduling. The availability snapshot is
    only as fresh as the bookings passed in; callers re-check inside the
    transaction that writes the booking.

    Raises:
        SlotUnavailableError: ``START_IN_PAST`` when the start is before
            ``now``, ``NO_SLOTS`` when the day has no availability at all, or
            ``SLOT_UNAVAILABLE`` when the slot is taken or not on the grid.
    """
    start = parse_instant(requested_start)
    reference = parse_instant(now) if now is not None else utc_now()
    zone = _resolve_timezone(tz)

    if start < reference:
        raise SlotUnavailableError("START_IN_PAST", "Selected time is in the past")

    day_start = datetime.combine(start.astimezone(zone).date(), time(0), tzinfo=zone)
    day_slots = generate_bookable_slots(
        rules, blackout_dates, service_duration_min, from_=day_start, lookahead_days=1, tz=zone
    )
    if not day_slots:
        raise SlotUnavailableError("NO_SLOTS", "Selected day has no availability")

    for slot in filter_slots_by_bookings(day_slots, existing_bookings, now=reference):
        if slot.start == start:
            return slot

    logger.info("Requested slot %s is no longer available", start.isoformat())
    raise SlotUnavailableError("SLOT_UNAVAILABLE", "Slot no longer available")


def summarize_available_dates(
    slots: Iterable[AvailabilitySlot],
    limit: int = MAX_DATES_RETURNED,
    tz: Union[tzinfo, str, None] = None,
) -> list[DateAvailability]:
    """Get the first N dates that still have slots, with per-date counts."""
    zone = _resolve_timezone(tz)
    counts: dict[date, int] = {}
    for slot in slots:
        day = slot.start.astimezone(zone).date()
        counts[day] = counts.get(day, 0) + 1

    results: list[DateAvailability] = []
    for day in sorted(counts)[:limit]:
        results.append(
            {
                "date": day.isoformat(),
                "day_name": day.strftime("%A"),
                "slot_count": counts[day],
            }
        )
    return results
