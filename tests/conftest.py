"""Shared test fixtures and helpers."""

from datetime import datetime, timezone
from typing import Optional

import pytest

from booknpay.schemas.availability_schema import (
    AvailabilityRule,
    AvailabilitySlot,
    BlackoutDate,
    BookingWindow,
)
from booknpay.schemas.booking_schema import Booking, BookingStatus, PayMode
from booknpay.schemas.payment_schema import PaymentIntent
from booknpay.schemas.wallet_schema import Wallet

# 2024-01-01 is a Monday.
MONDAY_0800 = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)


def utc(value: str) -> datetime:
    """Parse a compact ``YYYY-MM-DDTHH:MM`` string as UTC."""
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


def make_rule(
    day_of_week: int,
    start_time: str,
    end_time: str,
    rule_id: Optional[str] = None,
) -> AvailabilityRule:
    return AvailabilityRule(
        id=rule_id or f"rule-{day_of_week}-{start_time}",
        provider_id="provider-1",
        day_of_week=day_of_week,
        start_time=start_time,
        end_time=end_time,
    )


def make_blackout(day: str, reason: Optional[str] = "Holiday") -> BlackoutDate:
    return BlackoutDate(id=f"blackout-{day}", provider_id="provider-1", day=day, reason=reason)


def make_slot(start: str, end: str) -> AvailabilitySlot:
    return AvailabilitySlot(start=utc(start), end=utc(end))


def make_window(
    start: str,
    end: str,
    status: BookingStatus = BookingStatus.CONFIRMED,
    window_id: Optional[str] = None,
) -> BookingWindow:
    return BookingWindow(id=window_id, start_at=utc(start), end_at=utc(end), status=status)


def make_booking(
    booking_id: str = "booking-1",
    start: str = "2024-03-02T08:00",
    end: str = "2024-03-02T08:30",
    status: BookingStatus = BookingStatus.PENDING,
    pay_mode: Optional[PayMode] = None,
    notes: Optional[str] = None,
) -> Booking:
    return Booking(
        id=booking_id,
        provider_id="provider-1",
        service_id="service-1",
        customer_id="customer-1",
        start_at=utc(start),
        end_at=utc(end),
        status=status,
        pay_mode=pay_mode,
        notes=notes,
    )


class FakePaymentIntentProvider:
    """Records calls and returns a fixed checkout handle."""

    def __init__(
        self,
        checkout_url: str = "https://mockpay.local/checkout",
        reference: str = "mockpay_booking-1",
        error: Optional[Exception] = None,
    ) -> None:
        self.checkout_url = checkout_url
        self.reference = reference
        self.error = error
        self.calls: list[tuple[str, int]] = []

    async def create_per_booking_intent(self, booking_id: str, amount_cents: int) -> PaymentIntent:
        self.calls.append((booking_id, amount_cents))
        if self.error is not None:
            raise self.error
        return PaymentIntent(checkout_url=self.checkout_url, reference=self.reference)


@pytest.fixture
def wallet():
    return Wallet(id="wallet-1", provider_id="provider-1", balance_credits=2, currency="JMD")


@pytest.fixture
def empty_wallet(wallet):
    return wallet.model_copy(update={"balance_credits": 0})


@pytest.fixture
def booking():
    return make_booking()


@pytest.fixture
def weekday_rules():
    """Monday 09:00-11:00 and Tuesday 09:00-10:00."""
    return [make_rule(1, "09:00", "11:00", "r1"), make_rule(2, "09:00", "10:00", "r2")]


@pytest.fixture
def payment_provider():
    return FakePaymentIntentProvider()
