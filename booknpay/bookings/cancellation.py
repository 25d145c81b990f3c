"""
Cancellation planning.

Combines the cutoff policy with the booking's payment mode to decide what
a cancellation gives back: a wallet credit, a per-booking payment refund,
or nothing. The returned plan is applied by the caller in one transaction.
"""

import logging
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from booknpay.bookings.lifecycle import BookingEvent, BookingLifecycle
from booknpay.config import settings
from booknpay.errors import InvalidInputError
from booknpay.logging_context import request_scope
from booknpay.scheduling.cancellation_policy import evaluate_cancellation_policy
from booknpay.schemas.booking_schema import (
    Booking,
    BookingStatus,
    CancellationPolicyResult,
    CancelledBy,
    PayMode,
)
from booknpay.schemas.wallet_schema import LedgerResult, Wallet
from booknpay.utils import InstantLike, parse_instant, utc_now
from booknpay.wallet.ledger import refund_credit_for_cancellation

logger = logging.getLogger(__name__)


class RefundKind(str, Enum):
    NONE = "none"
    CREDIT = "credit"
    PAYMENT = "payment"


class CancellationPlan(BaseModel):
    """Everything the caller must persist to cancel one booking."""

    model_config = ConfigDict(frozen=True)

    booking_id: str
    next_status: BookingStatus
    policy: CancellationPolicyResult
    refund_kind: RefundKind
    ledger_result: Optional[LedgerResult] = None
    notes: Optional[str] = None

    @property
    def refund_issued(self) -> bool:
        return self.refund_kind != RefundKind.NONE


def append_note(existing: Optional[str], note: str) -> str:
    """Append a note as a new paragraph below any existing notes."""
    return "\n\n".join(segment for segment in (existing, note) if segment)


def plan_cancellation(
    booking: Booking,
    late_cancel_hours: Optional[Union[int, float]] = None,
    wallet: Optional[Wallet] = None,
    cancelled_by: CancelledBy = CancelledBy.PROVIDER,
    reason: Optional[str] = None,
    now: Optional[InstantLike] = None,
) -> CancellationPlan:
    """
    Decide how to cancel ``booking``.

    Only confirmed bookings are refunded, and only when the cancellation is
    outside the late-cancel cutoff. Credit-paid bookings get their credit
    back; per-booking payments are flagged for refund by the caller.
    ``late_cancel_hours`` falls back to ``DEFAULT_LATE_CANCEL_HOURS`` when the
    provider has no cutoff of its own.

    Raises:
        InvalidTransitionError: If the booking is not pending or confirmed.
        InvalidInputError: If a credit refund is due but no wallet was given.
    """
    if late_cancel_hours is None:
        late_cancel_hours = settings.scheduling.default_late_cancel_hours

    with request_scope(booking.id):
        reference = parse_instant(now) if now is not None else utc_now()
        lifecycle = BookingLifecycle(booking.status, now=reference)
        next_status = lifecycle.transition(BookingEvent.CANCEL, now=reference)

        policy = evaluate_cancellation_policy(booking.start_at, late_cancel_hours, now=reference)

        refund_kind = RefundKind.NONE
        ledger_result = None
        if booking.status == BookingStatus.CONFIRMED and policy.refund_eligible:
            if booking.pay_mode == PayMode.CREDIT:
                if wallet is None:
                    raise InvalidInputError("Wallet missing for credit refund")
                ledger_result = refund_credit_for_cancellation(wallet, booking, reference)
                refund_kind = RefundKind.CREDIT
            elif booking.pay_mode == PayMode.PER_BOOKING:
                refund_kind = RefundKind.PAYMENT

        notes = None
        if reason:
            actor = CancelledBy(cancelled_by).value
            notes = append_note(booking.notes, f"Cancellation note ({actor}): {reason}")

        logger.info(
            "Cancellation planned for booking %s: late=%s refund=%s",
            booking.id, policy.is_late, refund_kind.value,
        )
        return CancellationPlan(
            booking_id=booking.id,
            next_status=next_status,
            policy=policy,
            refund_kind=refund_kind,
            ledger_result=ledger_result,
            notes=notes,
        )
