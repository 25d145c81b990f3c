"""Booking data models and request validation."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from booknpay.config import settings
from booknpay.utils import as_aware


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"


# Statuses that occupy their time window on the provider's calendar.
BLOCKING_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


class PayMode(str, Enum):
    CREDIT = "credit"
    PER_BOOKING = "per_booking"


class Booking(BaseModel):
    """A placed booking as seen by the core."""

    model_config = ConfigDict(frozen=True)

    id: str
    provider_id: str
    service_id: str
    customer_id: str
    start_at: datetime
    end_at: datetime
    status: BookingStatus = BookingStatus.PENDING
    pay_mode: Optional[PayMode] = None
    notes: Optional[str] = None

    @field_validator("start_at", "end_at")
    @classmethod
    def ensure_timezone(cls, value: datetime) -> datetime:
        return as_aware(value)


class CancellationPolicyResult(BaseModel):
    """Outcome of evaluating a cancellation against the provider cutoff."""

    model_config = ConfigDict(frozen=True)

    is_late: bool
    refund_eligible: bool
    minutes_until_start: int


class CustomerInput(BaseModel):
    name: str = Field(min_length=2)
    email: EmailStr
    phone: str = Field(min_length=7, max_length=20)


class BookingRequest(BaseModel):
    """Validated public booking request."""

    provider_handle: str = Field(min_length=2)
    service_id: UUID
    start_at: datetime
    customer: CustomerInput
    notes: Optional[str] = Field(default=None, max_length=500)


class ConfirmBookingRequest(BaseModel):
    booking_id: UUID
    provider_id: UUID


class CancelledBy(str, Enum):
    PROVIDER = "provider"
    CUSTOMER = "customer"


class CancelBookingRequest(BaseModel):
    booking_id: UUID
    provider_id: UUID
    reason: Optional[str] = Field(default=None, max_length=500)
    cancelled_by: CancelledBy = CancelledBy.PROVIDER


class RescheduleBookingRequest(BaseModel):
    booking_id: UUID
    provider_id: UUID
    new_start_at: datetime
    charge_customer_fee: bool = False
    note: Optional[str] = Field(default=None, max_length=500)


class WalletTopupRequest(BaseModel):
    """Top-up request; the per-request cap lives here, not in the ledger."""

    credits: int = Field(strict=True, ge=1, le=settings.wallet.max_topup_credits)
