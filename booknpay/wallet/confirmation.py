"""
Booking confirmation decision.

A booking awaiting confirmation either consumes one prepaid credit or falls
back to a pay-per-booking checkout. The payment capability is injected so
the decision can be tested with a plain fake instead of a network mock.
"""

import logging
from typing import Optional, Protocol

from booknpay.logging_context import request_scope
from booknpay.schemas.booking_schema import Booking
from booknpay.schemas.payment_schema import (
    ConfirmationOutcome,
    ConfirmationStatus,
    PaymentIntent,
)
from booknpay.schemas.wallet_schema import Wallet
from booknpay.utils import InstantLike
from booknpay.wallet.ledger import consume_credit_for_booking

logger = logging.getLogger(__name__)

CONFIRMED_MESSAGE = "Booking confirmed and credit deducted."
REQUIRES_PAYMENT_MESSAGE = "No credits remaining. Provider must complete checkout to confirm booking."


class PaymentIntentProvider(Protocol):
    """External collaborator that opens a checkout for a single booking."""

    async def create_per_booking_intent(self, booking_id: str, amount_cents: int) -> PaymentIntent:
        ...


async def confirm_booking_happy_path(
    wallet: Wallet,
    booking: Booking,
    payment_intent_provider: PaymentIntentProvider,
    booking_amount_cents: int,
    now: Optional[InstantLike] = None,
) -> ConfirmationOutcome:
    """
    Confirm with a credit when one is available, otherwise request payment.

    Nothing is persisted. On CONFIRMED the caller stores the returned wallet
    and ledger entry; on REQUIRES_PAYMENT the wallet is untouched and the
    caller records a payment and waits for the webhook. Errors raised by the
    payment provider propagate unchanged; retries belong to the caller.
    """
    with request_scope(booking.id):
        if wallet.balance_credits < 1:
            intent = await payment_intent_provider.create_per_booking_intent(
                booking.id, booking_amount_cents
            )
            logger.info("Booking %s requires payment (ref %s)", booking.id, intent.reference)
            return ConfirmationOutcome(
                status=ConfirmationStatus.REQUIRES_PAYMENT,
                checkout_url=intent.checkout_url,
                payment_reference=intent.reference,
                message=REQUIRES_PAYMENT_MESSAGE,
            )

        result = consume_credit_for_booking(wallet, booking, now)
        logger.info("Booking %s confirmed with a credit", booking.id)
        return ConfirmationOutcome(
            status=ConfirmationStatus.CONFIRMED,
            wallet=result.wallet,
            ledger_entry=result.ledger_entry,
            message=CONFIRMED_MESSAGE,
        )
