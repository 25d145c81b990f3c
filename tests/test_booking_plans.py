"""Tests for slot resolution, cancellation plans and reschedule plans."""

from dataclasses import replace

import pytest

from booknpay.bookings.cancellation import RefundKind, append_note, plan_cancellation
from booknpay.bookings.reschedule import plan_reschedule
from booknpay.config import settings
from booknpay.errors import InvalidInputError, InvalidTransitionError, SlotUnavailableError
from booknpay.scheduling.availability import resolve_requested_slot
from booknpay.schemas.booking_schema import BookingStatus, CancelledBy, PayMode
from tests.conftest import make_blackout, make_booking, make_rule, make_window, utc

# Friday 2024-03-01; the fixture booking starts Saturday 2024-03-02 08:00.
NOW = utc("2024-03-01T08:00")


@pytest.fixture
def saturday_rules():
    return [make_rule(6, "08:00", "12:00", "sat")]


class TestResolveRequestedSlot:
    def test_returns_matching_slot(self, saturday_rules):
        slot = resolve_requested_slot(
            "2024-03-02T09:00:00Z", saturday_rules, [], 30, [], now=NOW
        )
        assert slot.start == utc("2024-03-02T09:00")
        assert slot.end == utc("2024-03-02T09:30")

    def test_start_in_past(self, saturday_rules):
        with pytest.raises(SlotUnavailableError) as excinfo:
            resolve_requested_slot(utc("2024-02-24T09:00"), saturday_rules, [], 30, [], now=NOW)
        assert excinfo.value.reason == "START_IN_PAST"

    def test_day_without_rules(self, saturday_rules):
        with pytest.raises(SlotUnavailableError) as excinfo:
            resolve_requested_slot(utc("2024-03-03T09:00"), saturday_rules, [], 30, [], now=NOW)
        assert excinfo.value.reason == "NO_SLOTS"

    def test_blackout_day_has_no_slots(self, saturday_rules):
        with pytest.raises(SlotUnavailableError) as excinfo:
            resolve_requested_slot(
                utc("2024-03-02T09:00"), saturday_rules, [make_blackout("2024-03-02")], 30, [],
                now=NOW,
            )
        assert excinfo.value.reason == "NO_SLOTS"

    def test_taken_slot(self, saturday_rules):
        taken = [make_window("2024-03-02T09:00", "2024-03-02T09:30")]
        with pytest.raises(SlotUnavailableError) as excinfo:
            resolve_requested_slot(utc("2024-03-02T09:00"), saturday_rules, [], 30, taken, now=NOW)
        assert excinfo.value.reason == "SLOT_UNAVAILABLE"

    def test_off_grid_start(self, saturday_rules):
        with pytest.raises(SlotUnavailableError) as excinfo:
            resolve_requested_slot(utc("2024-03-02T09:10"), saturday_rules, [], 30, [], now=NOW)
        assert excinfo.value.reason == "SLOT_UNAVAILABLE"

    def test_cancelled_booking_frees_slot(self, saturday_rules):
        cancelled = [make_window("2024-03-02T09:00", "2024-03-02T09:30", BookingStatus.CANCELLED)]
        slot = resolve_requested_slot(
            utc("2024-03-02T09:00"), saturday_rules, [], 30, cancelled, now=NOW
        )
        assert slot.start == utc("2024-03-02T09:00")


class TestPlanCancellation:
    def test_confirmed_credit_booking_refunds_credit(self, empty_wallet):
        booking = make_booking(status=BookingStatus.CONFIRMED, pay_mode=PayMode.CREDIT)
        plan = plan_cancellation(booking, 12, wallet=empty_wallet, now=NOW)
        assert plan.next_status == BookingStatus.CANCELLED
        assert plan.refund_kind == RefundKind.CREDIT
        assert plan.refund_issued
        assert plan.ledger_result.wallet.balance_credits == 1
        assert plan.ledger_result.ledger_entry.booking_id == booking.id

    def test_late_cancellation_keeps_credit(self, wallet):
        booking = make_booking(status=BookingStatus.CONFIRMED, pay_mode=PayMode.CREDIT)
        plan = plan_cancellation(booking, 48, wallet=wallet, now=NOW)
        assert plan.policy.is_late is True
        assert plan.refund_kind == RefundKind.NONE
        assert plan.ledger_result is None

    def test_per_booking_payment_flagged_for_refund(self):
        booking = make_booking(status=BookingStatus.CONFIRMED, pay_mode=PayMode.PER_BOOKING)
        plan = plan_cancellation(booking, 12, now=NOW)
        assert plan.refund_kind == RefundKind.PAYMENT
        assert plan.ledger_result is None

    def test_pending_booking_gets_no_refund(self, wallet):
        booking = make_booking(status=BookingStatus.PENDING, pay_mode=PayMode.CREDIT)
        plan = plan_cancellation(booking, 0, wallet=wallet, now=NOW)
        assert plan.next_status == BookingStatus.CANCELLED
        assert plan.refund_kind == RefundKind.NONE

    def test_credit_refund_without_wallet(self):
        booking = make_booking(status=BookingStatus.CONFIRMED, pay_mode=PayMode.CREDIT)
        with pytest.raises(InvalidInputError, match="Wallet missing"):
            plan_cancellation(booking, 12, now=NOW)

    @pytest.mark.parametrize(
        "status", [BookingStatus.CANCELLED, BookingStatus.COMPLETED, BookingStatus.NO_SHOW]
    )
    def test_terminal_booking_cannot_be_cancelled(self, status):
        with pytest.raises(InvalidTransitionError):
            plan_cancellation(make_booking(status=status), 12, now=NOW)

    def test_reason_appended_to_notes(self):
        booking = make_booking(notes="Bring towel")
        plan = plan_cancellation(
            booking, 0, cancelled_by=CancelledBy.CUSTOMER, reason="Sick", now=NOW
        )
        assert plan.notes == "Bring towel\n\nCancellation note (customer): Sick"

    def test_no_reason_leaves_notes_alone(self):
        plan = plan_cancellation(make_booking(notes="Keep"), 0, now=NOW)
        assert plan.notes is None


class TestAppendNote:
    def test_first_note(self):
        assert append_note(None, "hello") == "hello"

    def test_appends_paragraph(self):
        assert append_note("a", "b") == "a\n\nb"


class TestPlanReschedule:
    def test_moves_to_free_slot(self, saturday_rules):
        booking = make_booking(start="2024-03-02T08:00", end="2024-03-02T08:30",
                               status=BookingStatus.CONFIRMED)
        plan = plan_reschedule(
            booking, "2024-03-02T10:00:00Z", saturday_rules, [], 30, [booking], now=NOW
        )
        assert plan.status == BookingStatus.CONFIRMED
        assert plan.slot.start == utc("2024-03-02T10:00")
        assert plan.fee_cents == 0
        assert plan.notes is None

    def test_own_window_does_not_block(self, saturday_rules):
        booking = make_booking(start="2024-03-02T08:00", end="2024-03-02T08:30")
        plan = plan_reschedule(
            booking, utc("2024-03-02T08:00"), saturday_rules, [], 30, [booking], now=NOW
        )
        assert plan.slot.start == utc("2024-03-02T08:00")

    def test_other_booking_blocks(self, saturday_rules):
        booking = make_booking()
        other = make_booking(booking_id="booking-2", start="2024-03-02T10:00",
                             end="2024-03-02T10:30", status=BookingStatus.CONFIRMED)
        with pytest.raises(SlotUnavailableError):
            plan_reschedule(
                booking, utc("2024-03-02T10:00"), saturday_rules, [], 30, [booking, other], now=NOW
            )

    def test_fee_only_when_charged(self, saturday_rules):
        booking = make_booking()
        charged = plan_reschedule(
            booking, utc("2024-03-02T10:00"), saturday_rules, [], 30, [],
            reschedule_fee_cents=1500, charge_customer_fee=True, now=NOW,
        )
        waived = plan_reschedule(
            booking, utc("2024-03-02T10:00"), saturday_rules, [], 30, [],
            reschedule_fee_cents=1500, now=NOW,
        )
        assert charged.fee_cents == 1500
        assert waived.fee_cents == 0

    def test_note_appended(self, saturday_rules):
        booking = make_booking(notes="Original")
        plan = plan_reschedule(
            booking, utc("2024-03-02T10:00"), saturday_rules, [], 30, [],
            note="Client asked", now=NOW,
        )
        assert plan.notes == "Original\n\nReschedule note: Client asked"

    def test_cancelled_booking_cannot_move(self, saturday_rules):
        booking = make_booking(status=BookingStatus.CANCELLED)
        with pytest.raises(InvalidTransitionError):
            plan_reschedule(
                booking, utc("2024-03-02T10:00"), saturday_rules, [], 30, [], now=NOW
            )

    def test_own_anonymous_window_does_not_block(self):
        rules = [make_rule(6, "08:00", "10:00", "early"), make_rule(6, "08:30", "10:30", "late")]
        booking = make_booking(start="2024-03-02T08:00", end="2024-03-02T09:00",
                               status=BookingStatus.CONFIRMED)
        own = make_window("2024-03-02T08:00", "2024-03-02T09:00")
        plan = plan_reschedule(booking, utc("2024-03-02T08:30"), rules, [], 60, [own], now=NOW)
        assert plan.slot.start == utc("2024-03-02T08:30")
        assert plan.slot.end == utc("2024-03-02T09:30")

    def test_own_window_matched_by_id(self):
        rules = [make_rule(6, "08:00", "10:00", "early"), make_rule(6, "08:30", "10:30", "late")]
        booking = make_booking(start="2024-03-02T08:00", end="2024-03-02T09:00")
        own = make_window("2024-03-02T08:00", "2024-03-02T09:00", window_id="booking-1")
        plan = plan_reschedule(booking, utc("2024-03-02T08:30"), rules, [], 60, [own], now=NOW)
        assert plan.slot.start == utc("2024-03-02T08:30")

    def test_other_window_with_same_interval_still_blocks(self):
        rules = [make_rule(6, "08:00", "10:00", "early"), make_rule(6, "08:30", "10:30", "late")]
        booking = make_booking(start="2024-03-02T08:00", end="2024-03-02T09:00")
        other = make_window("2024-03-02T08:00", "2024-03-02T09:00", window_id="booking-2")
        with pytest.raises(SlotUnavailableError):
            plan_reschedule(booking, utc("2024-03-02T08:30"), rules, [], 60, [other], now=NOW)


class TestPlansUseCallerClock:
    @pytest.fixture(autouse=True)
    def frozen_clock(self, monkeypatch):
        def _no_clock():
            raise AssertionError("global clock read despite an explicit now")

        monkeypatch.setattr("booknpay.bookings.lifecycle.utc_now", _no_clock)
        monkeypatch.setattr("booknpay.bookings.cancellation.utc_now", _no_clock)
        monkeypatch.setattr("booknpay.bookings.reschedule.utc_now", _no_clock)

    def test_cancellation(self, wallet):
        booking = make_booking(status=BookingStatus.CONFIRMED, pay_mode=PayMode.CREDIT)
        plan = plan_cancellation(booking, 12, wallet=wallet, now=NOW)
        assert plan.ledger_result.ledger_entry.created_at == NOW

    def test_reschedule(self, saturday_rules):
        plan = plan_reschedule(
            make_booking(), utc("2024-03-02T10:00"), saturday_rules, [], 30, [], now=NOW
        )
        assert plan.slot.start == utc("2024-03-02T10:00")


class TestDefaultLateCancelHours:
    def test_falls_back_to_configured_cutoff(self, monkeypatch, wallet):
        configured = replace(
            settings, scheduling=replace(settings.scheduling, default_late_cancel_hours=48)
        )
        monkeypatch.setattr("booknpay.bookings.cancellation.settings", configured)
        booking = make_booking(status=BookingStatus.CONFIRMED, pay_mode=PayMode.CREDIT)

        plan = plan_cancellation(booking, wallet=wallet, now=NOW)

        assert plan.policy.is_late is True
        assert plan.refund_kind == RefundKind.NONE

    def test_explicit_cutoff_wins(self, monkeypatch, wallet):
        configured = replace(
            settings, scheduling=replace(settings.scheduling, default_late_cancel_hours=48)
        )
        monkeypatch.setattr("booknpay.bookings.cancellation.settings", configured)
        booking = make_booking(status=BookingStatus.CONFIRMED, pay_mode=PayMode.CREDIT)

        plan = plan_cancellation(booking, 12, wallet=wallet, now=NOW)

        assert plan.refund_kind == RefundKind.CREDIT
