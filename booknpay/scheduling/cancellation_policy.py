"""Late-cancellation cutoff evaluation."""

import logging
from typing import Optional, Union

from booknpay.errors import InvalidInputError
from booknpay.schemas.booking_schema import CancellationPolicyResult
from booknpay.utils import InstantLike, parse_instant, utc_now

logger = logging.getLogger(__name__)

SECONDS_PER_MINUTE = 60


def evaluate_cancellation_policy(
    booking_start_at: InstantLike,
    late_cancel_hours: Union[int, float],
    now: Optional[InstantLike] = None,
) -> CancellationPolicyResult:
    """
    Decide whether cancelling now is late and whether it earns a refund.

    ``minutes_until_start`` counts whole minutes, truncated toward zero, and
    is negative once the booking has started. A cutoff of zero hours makes
    every cancellation before the start time refund-eligible.

    Raises:
        InvalidInputError: If ``booking_start_at`` is not a valid instant.
    """
    try:
        start_at = parse_instant(booking_start_at)
    except InvalidInputError:
        raise InvalidInputError("INVALID_START_AT") from None
    reference = parse_instant(now) if now is not None else utc_now()

    minutes_until_start = int((start_at - reference).total_seconds() / SECONDS_PER_MINUTE)
    cutoff_minutes = max(0, late_cancel_hours) * 60
    refund_eligible = minutes_until_start >= cutoff_minutes

    logger.debug(
        "Cancellation %d min before start against %s min cutoff: refund_eligible=%s",
        minutes_until_start, cutoff_minutes, refund_eligible,
    )
    return CancellationPolicyResult(
        is_late=not refund_eligible,
        refund_eligible=refund_eligible,
        minutes_until_start=minutes_until_start,
    )
