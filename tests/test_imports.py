"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""


class TestPackageImports:
    def test_import_schemas(self):
        from booknpay.schemas import AvailabilitySlot, Booking, BookingStatus, Wallet
        assert BookingStatus.NO_SHOW == "no_show"
        assert Wallet is not None
        assert Booking is not None
        assert AvailabilitySlot is not None

    def test_import_scheduling(self):
        from booknpay.scheduling import (
            evaluate_cancellation_policy,
            filter_slots_by_bookings,
            generate_bookable_slots,
        )
        assert callable(generate_bookable_slots)
        assert callable(filter_slots_by_bookings)
        assert callable(evaluate_cancellation_policy)

    def test_import_wallet(self):
        from booknpay.wallet import add_credits, confirm_booking_happy_path
        assert callable(add_credits)
        assert callable(confirm_booking_happy_path)

    def test_import_payments(self):
        from booknpay.payments import MockPaymentGateway, resolve_payment_event
        assert MockPaymentGateway().base_url.startswith("http")
        assert callable(resolve_payment_event)

    def test_import_bookings(self):
        from booknpay.bookings import BookingLifecycle, plan_cancellation, plan_reschedule
        assert BookingLifecycle().current_status == "pending"
        assert callable(plan_cancellation)
        assert callable(plan_reschedule)

    def test_version(self):
        import booknpay
        assert booknpay.__version__
