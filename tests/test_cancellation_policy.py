"""Tests for the late-cancellation cutoff."""

from datetime import timedelta

import pytest

from booknpay.errors import InvalidInputError
from booknpay.scheduling.cancellation_policy import evaluate_cancellation_policy
from tests.conftest import utc

NOW = utc("2024-03-01T08:00")


class TestEvaluateCancellationPolicy:
    def test_refund_when_cancelling_before_cutoff(self):
        result = evaluate_cancellation_policy(NOW + timedelta(hours=20), 12, now=NOW)
        assert result.refund_eligible is True
        assert result.is_late is False
        assert result.minutes_until_start == 20 * 60

    def test_late_inside_cutoff(self):
        result = evaluate_cancellation_policy(NOW + timedelta(hours=8), 12, now=NOW)
        assert result.refund_eligible is False
        assert result.is_late is True
        assert result.minutes_until_start == 8 * 60

    def test_exactly_at_cutoff_is_refundable(self):
        result = evaluate_cancellation_policy(NOW + timedelta(hours=12), 12, now=NOW)
        assert result.refund_eligible is True

    def test_one_minute_inside_cutoff_is_late(self):
        start = NOW + timedelta(hours=12) - timedelta(minutes=1)
        result = evaluate_cancellation_policy(start, 12, now=NOW)
        assert result.is_late is True

    def test_zero_hours_refunds_anything_before_start(self):
        result = evaluate_cancellation_policy(NOW + timedelta(minutes=1), 0, now=NOW)
        assert result.refund_eligible is True

    def test_negative_cutoff_treated_as_zero(self):
        result = evaluate_cancellation_policy(NOW + timedelta(minutes=5), -3, now=NOW)
        assert result.refund_eligible is True

    def test_past_booking_has_negative_minutes_and_is_late(self):
        result = evaluate_cancellation_policy(NOW - timedelta(minutes=90), 0, now=NOW)
        assert result.minutes_until_start == -90
        assert result.is_late is True

    def test_partial_minutes_truncate_toward_zero(self):
        start = NOW + timedelta(minutes=59, seconds=59)
        assert evaluate_cancellation_policy(start, 0, now=NOW).minutes_until_start == 59

        past = NOW - timedelta(minutes=1, seconds=30)
        assert evaluate_cancellation_policy(past, 0, now=NOW).minutes_until_start == -1

    def test_fractional_hours_cutoff(self):
        result = evaluate_cancellation_policy(NOW + timedelta(minutes=89), 1.5, now=NOW)
        assert result.is_late is True

    def test_accepts_iso_string(self):
        result = evaluate_cancellation_policy("2024-03-02T08:00:00.000Z", 12, now=NOW)
        assert result.minutes_until_start == 24 * 60

    @pytest.mark.parametrize("bad", ["", "tomorrow", "2024-13-45T00:00:00Z", None])
    def test_rejects_unparseable_start(self, bad):
        with pytest.raises(InvalidInputError, match="INVALID_START_AT"):
            evaluate_cancellation_policy(bad, 12, now=NOW)
