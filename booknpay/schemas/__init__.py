from booknpay.schemas.availability_schema import (
    AvailabilityRule,
    AvailabilitySlot,
    BlackoutDate,
    BookingWindow,
)
from booknpay.schemas.booking_schema import (
    Booking,
    BookingStatus,
    CancellationPolicyResult,
    PayMode,
)
from booknpay.schemas.payment_schema import (
    ConfirmationOutcome,
    ConfirmationStatus,
    PaymentIntent,
)
from booknpay.schemas.wallet_schema import LedgerResult, Wallet, WalletLedgerEntry

__all__ = [
    "AvailabilityRule",
    "AvailabilitySlot",
    "BlackoutDate",
    "BookingWindow",
    "Booking",
    "BookingStatus",
    "CancellationPolicyResult",
    "PayMode",
    "ConfirmationOutcome",
    "ConfirmationStatus",
    "PaymentIntent",
    "LedgerResult",
    "Wallet",
    "WalletLedgerEntry",
]
