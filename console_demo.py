"""
Offline console demo: walks a sample provider through the booking core.

Uses the real slot generator, availability filter, wallet ledger,
confirmation decision and cancellation planner with the mock payment
gateway. No database, no network calls.

Usage:
    python console_demo.py
    python console_demo.py --scenario confirm
    python console_demo.py --scenario cancel
    python console_demo.py --scenario cancel --verbose
"""

import argparse
import asyncio
import logging
from datetime import date, datetime, timedelta, timezone

from booknpay.bookings.cancellation import plan_cancellation
from booknpay.config import settings
from booknpay.errors import SlotUnavailableError
from booknpay.logging_context import install_request_handler
from booknpay.payments.gateway import MockPaymentGateway
from booknpay.scheduling.availability import (
    filter_slots_by_bookings,
    generate_bookable_slots,
    resolve_requested_slot,
    summarize_available_dates,
)
from booknpay.schemas.availability_schema import AvailabilityRule, BlackoutDate
from booknpay.schemas.booking_schema import Booking, BookingStatus, PayMode
from booknpay.schemas.wallet_schema import Wallet
from booknpay.utils import format_currency, to_iso
from booknpay.wallet.confirmation import confirm_booking_happy_path
from booknpay.wallet.ledger import add_credits

GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

PROVIDER_ID = "provider-demo"
SERVICE_DURATION_MIN = 45
SERVICE_PRICE_CENTS = 450000
LATE_CANCEL_HOURS = 12


def _next_weekday(start: date, weekday: int) -> date:
    """Next date on or after ``start`` with Python weekday number ``weekday``."""
    return start + timedelta(days=(weekday - start.weekday()) % 7)


class DemoSession:
    """Holds the sample provider's calendar and wallet for one run."""

    def __init__(self) -> None:
        self.now = datetime.now(timezone.utc).replace(second=0, microsecond=0)
        self.rules = [
            AvailabilityRule(id=f"rule-{dow}-am", provider_id=PROVIDER_ID,
                             day_of_week=dow, start_time="09:00", end_time="12:00")
            for dow in range(1, 6)
        ] + [
            AvailabilityRule(id=f"rule-{dow}-pm", provider_id=PROVIDER_ID,
                             day_of_week=dow, start_time="13:00", end_time="17:00")
            for dow in range(1, 6)
        ]
        holiday = _next_weekday(self.now.date() + timedelta(days=1), 2)
        self.blackouts = [
            BlackoutDate(id="blackout-1", provider_id=PROVIDER_ID, day=holiday, reason="Holiday")
        ]
        self.wallet = Wallet.open(PROVIDER_ID)
        self.gateway = MockPaymentGateway()
        self.bookings: list[Booking] = []

    def log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def say(self, text: str, colour: str = GREEN) -> None:
        print(f"{colour}{text}{RESET}")

    def available_slots(self):
        slots = generate_bookable_slots(
            self.rules, self.blackouts, SERVICE_DURATION_MIN, from_=self.now
        )
        return filter_slots_by_bookings(slots, self.bookings, now=self.now)

    def show_slots(self) -> None:
        slots = self.available_slots()
        self.say(f"{len(slots)} open slots in the next {settings.scheduling.default_lookahead_days} days")
        for summary in summarize_available_dates(slots):
            self.log(f"{summary['date']} ({summary['day_name']}): {summary['slot_count']} slots")
        self.log(f"Blackout: {self.blackouts[0].day.isoformat()} ({self.blackouts[0].reason})")

    def book_first_slot(self) -> Booking:
        slot = self.available_slots()[0]
        resolved = resolve_requested_slot(
            slot.start, self.rules, self.blackouts, SERVICE_DURATION_MIN,
            self.bookings, now=self.now,
        )
        booking = Booking(
            id=f"booking-{len(self.bookings) + 1}",
            provider_id=PROVIDER_ID,
            service_id="service-demo",
            customer_id="customer-demo",
            start_at=resolved.start,
            end_at=resolved.end,
            status=BookingStatus.PENDING,
        )
        self.bookings.append(booking)
        self.say(f"Booked {booking.id} at {to_iso(booking.start_at)}")

        try:
            resolve_requested_slot(
                slot.start, self.rules, self.blackouts, SERVICE_DURATION_MIN,
                self.bookings, now=self.now,
            )
        except SlotUnavailableError as exc:
            self.log(f"Second request for the same slot rejected: {exc.reason}")
        return booking

    async def confirm(self, booking: Booking) -> Booking:
        outcome = await confirm_booking_happy_path(
            self.wallet, booking, self.gateway, SERVICE_PRICE_CENTS, now=self.now
        )
        self.say(f"[{outcome.status.value}] {outcome.message}", YELLOW)
        if outcome.is_confirmed:
            self.wallet = outcome.wallet
            self.log(f"Ledger: {outcome.ledger_entry.description} ({outcome.ledger_entry.change_credits:+d})")
            return booking.model_copy(update={"status": BookingStatus.CONFIRMED, "pay_mode": PayMode.CREDIT})

        self.log(f"Checkout: {outcome.checkout_url} "
                 f"({format_currency(SERVICE_PRICE_CENTS, self.wallet.currency)})")
        return booking.model_copy(update={"pay_mode": PayMode.PER_BOOKING})

    def run_slots(self) -> None:
        self.show_slots()

    def run_confirm(self) -> None:
        booking = self.book_first_slot()
        asyncio.run(self.confirm(booking))

        topup = add_credits(self.wallet, 3, now=self.now)
        self.wallet = topup.wallet
        self.say(f"{topup.ledger_entry.description}: balance {self.wallet.balance_credits}")
        asyncio.run(self.confirm(booking))
        self.log(f"Balance now {self.wallet.balance_credits}")

    def run_cancel(self) -> None:
        self.wallet = add_credits(self.wallet, 1, now=self.now).wallet
        booking = asyncio.run(self.confirm(self.book_first_slot()))
        plan = plan_cancellation(
            booking, LATE_CANCEL_HOURS, wallet=self.wallet,
            reason="Client asked to cancel", now=self.now,
        )
        colour = RED if plan.policy.is_late else GREEN
        self.say(
            f"Cancellation {plan.policy.minutes_until_start} min before start: "
            f"late={plan.policy.is_late}, refund={plan.refund_kind.value}",
            colour,
        )
        if plan.ledger_result:
            self.wallet = plan.ledger_result.wallet
            self.log(f"Balance after refund: {self.wallet.balance_credits}")

    SCENARIOS = {
        "slots": run_slots,
        "confirm": run_confirm,
        "cancel": run_cancel,
    }

    def run_scenario(self, scenario: str) -> None:
        handler = self.SCENARIOS.get(scenario)
        if handler is None:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {settings.app_name.upper()} - Scenario: {scenario}{RESET}")
        print(f"{BOLD}  Reference time: {to_iso(self.now)}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        handler(self)
        print(f"{BOLD}{'=' * 60}{RESET}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline booking core demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(DemoSession.SCENARIOS),
        default="slots",
        help="Which walkthrough to run",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print booknpay decision logs tagged with the booking id",
    )
    args = parser.parse_args()
    if args.verbose:
        install_request_handler(level=logging.DEBUG)
    DemoSession().run_scenario(args.scenario)


if __name__ == "__main__":
    main()
