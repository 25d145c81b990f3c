from booknpay.bookings.cancellation import CancellationPlan, RefundKind, plan_cancellation
from booknpay.bookings.lifecycle import BookingEvent, BookingLifecycle
from booknpay.bookings.reschedule import ReschedulePlan, plan_reschedule

__all__ = [
    "BookingLifecycle",
    "BookingEvent",
    "CancellationPlan",
    "RefundKind",
    "plan_cancellation",
    "ReschedulePlan",
    "plan_reschedule",
]
