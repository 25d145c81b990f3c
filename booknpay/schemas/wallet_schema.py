"""Prepaid credit wallet and ledger models."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from booknpay.config import settings
from booknpay.utils import as_aware


class Wallet(BaseModel):
    """Snapshot of a provider's credit balance.

    Snapshots are immutable; ledger operations return a new Wallet.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    provider_id: str
    balance_credits: int = Field(ge=0)
    currency: str = settings.wallet.default_currency

    @classmethod
    def open(cls, provider_id: str, currency: Optional[str] = None) -> "Wallet":
        """Create the zero-balance wallet a provider gets on first top-up."""
        return cls(
            id=str(uuid.uuid4()),
            provider_id=provider_id,
            balance_credits=0,
            currency=currency or settings.wallet.default_currency,
        )


class WalletLedgerEntry(BaseModel):
    """One append-only balance change."""

    model_config = ConfigDict(frozen=True)

    id: str
    wallet_id: str
    booking_id: Optional[str] = None
    change_credits: int
    description: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def ensure_timezone(cls, value: datetime) -> datetime:
        return as_aware(value)


class LedgerResult(BaseModel):
    """Updated wallet plus the entry that explains the change.

    Callers persist both in the same transaction.
    """

    model_config = ConfigDict(frozen=True)

    wallet: Wallet
    ledger_entry: WalletLedgerEntry
