"""Payment intent, webhook and confirmation outcome models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from booknpay.schemas.wallet_schema import Wallet, WalletLedgerEntry


class PaymentStatus(str, Enum):
    INITIATED = "initiated"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentEventType(str, Enum):
    SUCCEEDED = "payment.succeeded"
    FAILED = "payment.failed"


class PaymentIntent(BaseModel):
    """Checkout handle returned by a payment gateway."""

    model_config = ConfigDict(frozen=True)

    checkout_url: str
    reference: str


class TopupIntent(BaseModel):
    model_config = ConfigDict(frozen=True)

    checkout_url: str


class PaymentEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: PaymentEventType
    ref_id: str


class PaymentWebhookResolution(BaseModel):
    """What the webhook handler should persist for one payment event."""

    model_config = ConfigDict(frozen=True)

    next_payment_status: PaymentStatus
    should_update_payment: bool
    should_confirm_booking: bool
    should_create_receipt_notification: bool
    already_processed: bool
    message: str


class ConfirmationStatus(str, Enum):
    CONFIRMED = "confirmed"
    REQUIRES_PAYMENT = "requires_payment"


class ConfirmationOutcome(BaseModel):
    """Terminal result of a confirmation attempt.

    CONFIRMED carries ``wallet`` and ``ledger_entry``; REQUIRES_PAYMENT
    carries ``checkout_url`` and ``payment_reference``.
    """

    model_config = ConfigDict(frozen=True)

    status: ConfirmationStatus
    message: str
    wallet: Optional[Wallet] = None
    ledger_entry: Optional[WalletLedgerEntry] = None
    checkout_url: Optional[str] = None
    payment_reference: Optional[str] = None

    @property
    def is_confirmed(self) -> bool:
        return self.status == ConfirmationStatus.CONFIRMED
