"""Payment webhook resolution: what to do with one gateway event.

The decision depends only on the event type, the stored payment status and
the status of the booking the payment belongs to. Duplicate deliveries are
reported as already processed so handlers stay idempotent.
"""

import logging
from typing import Optional

from booknpay.schemas.booking_schema import BookingStatus
from booknpay.schemas.payment_schema import (
    PaymentEventType,
    PaymentStatus,
    PaymentWebhookResolution,
)

logger = logging.getLogger(__name__)


def _no_op(status: PaymentStatus, message: str) -> PaymentWebhookResolution:
    return PaymentWebhookResolution(
        next_payment_status=status,
        should_update_payment=False,
        should_confirm_booking=False,
        should_create_receipt_notification=False,
        already_processed=True,
        message=message,
    )


def resolve_payment_event(
    event_type: PaymentEventType,
    payment_status: PaymentStatus,
    booking_status: Optional[BookingStatus] = None,
) -> PaymentWebhookResolution:
    """Resolve a payment event against current payment and booking state."""
    event_type = PaymentEventType(event_type)
    payment_status = PaymentStatus(payment_status)

    if event_type == PaymentEventType.SUCCEEDED:
        if payment_status == PaymentStatus.SUCCEEDED:
            return _no_op(PaymentStatus.SUCCEEDED, "Payment already marked as succeeded.")

        can_confirm = (
            booking_status is not None
            and BookingStatus(booking_status) != BookingStatus.CONFIRMED
        )
        logger.info("Payment succeeded; confirm booking=%s", can_confirm)
        return PaymentWebhookResolution(
            next_payment_status=PaymentStatus.SUCCEEDED,
            should_update_payment=True,
            should_confirm_booking=can_confirm,
            should_create_receipt_notification=can_confirm,
            already_processed=False,
            message=(
                "Payment succeeded. Booking will transition to confirmed."
                if can_confirm
                else "Payment succeeded without a pending booking to confirm."
            ),
        )

    if payment_status == PaymentStatus.FAILED:
        return _no_op(PaymentStatus.FAILED, "Payment already marked as failed.")

    if payment_status == PaymentStatus.SUCCEEDED:
        return _no_op(PaymentStatus.SUCCEEDED, "Ignoring failure event for a succeeded payment.")

    logger.info("Payment failed; marking payment record as failed")
    return PaymentWebhookResolution(
        next_payment_status=PaymentStatus.FAILED,
        should_update_payment=True,
        should_confirm_booking=False,
        should_create_receipt_notification=False,
        already_processed=False,
        message="Payment marked as failed.",
    )
