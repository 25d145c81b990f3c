"""
Prepaid credit accounting.

Each operation takes a wallet snapshot and returns the updated snapshot
together with the ledger entry that explains the change. Nothing is
persisted here: the caller writes the new balance and the entry in one
transaction, which keeps ``balance == sum(change_credits)`` true in storage.
"""

import logging
import uuid
from datetime import datetime
from typing import Iterable, Optional

from booknpay.errors import InsufficientCreditsError, InvalidTopupAmountError
from booknpay.schemas.booking_schema import Booking
from booknpay.schemas.wallet_schema import LedgerResult, Wallet, WalletLedgerEntry
from booknpay.utils import InstantLike, parse_instant, utc_now

logger = logging.getLogger(__name__)

CONSUMED_DESCRIPTION = "Credit consumed for booking confirmation"
REFUNDED_DESCRIPTION = "Credit refunded after cancellation"


def _topup_description(credits: int) -> str:
    return f"Top up {credits} credit" if credits == 1 else f"Top up {credits} credits"


def _apply(
    wallet: Wallet,
    change: int,
    description: str,
    now: Optional[InstantLike],
    booking_id: Optional[str] = None,
) -> LedgerResult:
    created_at: datetime = parse_instant(now) if now is not None else utc_now()
    updated = wallet.model_copy(update={"balance_credits": wallet.balance_credits + change})
    entry = WalletLedgerEntry(
        id=str(uuid.uuid4()),
        wallet_id=wallet.id,
        booking_id=booking_id,
        change_credits=change,
        description=description,
        created_at=created_at,
    )
    logger.info(
        "Wallet %s: %+d credit(s), balance %d -> %d",
        wallet.id, change, wallet.balance_credits, updated.balance_credits,
    )
    return LedgerResult(wallet=updated, ledger_entry=entry)


def add_credits(
    wallet: Wallet, credits_to_add: int, now: Optional[InstantLike] = None
) -> LedgerResult:
    """Top up a wallet.

    The per-request cap is enforced by ``WalletTopupRequest``; this only
    insists on a positive whole number.

    Raises:
        InvalidTopupAmountError: If ``credits_to_add`` is not a positive int.
    """
    if (
        isinstance(credits_to_add, bool)
        or not isinstance(credits_to_add, int)
        or credits_to_add < 1
    ):
        raise InvalidTopupAmountError()
    return _apply(wallet, credits_to_add, _topup_description(credits_to_add), now)


def consume_credit_for_booking(
    wallet: Wallet, booking: Booking, now: Optional[InstantLike] = None
) -> LedgerResult:
    """Spend one credit to confirm ``booking``.

    Raises:
        InsufficientCreditsError: If the wallet balance is below one.
    """
    if wallet.balance_credits < 1:
        raise InsufficientCreditsError()
    return _apply(wallet, -1, CONSUMED_DESCRIPTION, now, booking_id=booking.id)


def refund_credit_for_cancellation(
    wallet: Wallet, booking: Booking, now: Optional[InstantLike] = None
) -> LedgerResult:
    """Return one credit after a refund-eligible cancellation.

    Always succeeds. Nothing checks that a matching consumption exists, so
    the caller must only refund bookings that were paid with a credit.
    """
    return _apply(wallet, 1, REFUNDED_DESCRIPTION, now, booking_id=booking.id)


def replay_ledger(opening_balance: int, entries: Iterable[WalletLedgerEntry]) -> int:
    """Balance implied by an opening balance plus every recorded change."""
    return opening_balance + sum(entry.change_credits for entry in entries)
