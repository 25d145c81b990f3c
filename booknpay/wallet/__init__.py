from booknpay.wallet.confirmation import PaymentIntentProvider, confirm_booking_happy_path
from booknpay.wallet.ledger import (
    add_credits,
    consume_credit_for_booking,
    refund_credit_for_cancellation,
    replay_ledger,
)

__all__ = [
    "add_credits",
    "consume_credit_for_booking",
    "refund_credit_for_cancellation",
    "replay_ledger",
    "confirm_booking_happy_path",
    "PaymentIntentProvider",
]
