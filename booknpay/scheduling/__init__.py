from booknpay.scheduling.availability import (
    filter_slots_by_bookings,
    generate_bookable_slots,
    resolve_requested_slot,
    summarize_available_dates,
)
from booknpay.scheduling.cancellation_policy import evaluate_cancellation_policy

__all__ = [
    "generate_bookable_slots",
    "filter_slots_by_bookings",
    "resolve_requested_slot",
    "summarize_available_dates",
    "evaluate_cancellation_policy",
]
