"""Availability reference data and derived slot models."""

from datetime import date, datetime, time, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from booknpay.schemas.booking_schema import BookingStatus
from booknpay.utils import as_aware


class AvailabilityRule(BaseModel):
    """Recurring weekly open window. ``day_of_week`` uses 0 = Sunday."""

    model_config = ConfigDict(frozen=True)

    id: str
    provider_id: str
    day_of_week: int = Field(ge=0, le=6)
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def check_window(self) -> "AvailabilityRule":
        if self.start_time >= self.end_time:
            raise ValueError(
                f"start_time {self.start_time} must be before end_time {self.end_time}"
            )
        return self


class BlackoutDate(BaseModel):
    """A calendar date removed from availability regardless of rules."""

    model_config = ConfigDict(frozen=True)

    id: str
    provider_id: str
    day: date
    reason: Optional[str] = None


class AvailabilitySlot(BaseModel):
    """Single bookable window. Derived per request and never persisted."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def ensure_timezone(cls, value: datetime) -> datetime:
        return as_aware(value)

    @model_validator(mode="after")
    def check_order(self) -> "AvailabilitySlot":
        if self.end <= self.start:
            raise ValueError("slot end must be after slot start")
        return self

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, start_at: datetime, end_at: datetime) -> bool:
        """Half-open interval overlap; touching edges do not collide."""
        return self.start < end_at and start_at < self.end


class BookingWindow(BaseModel):
    """The occupied interval of an existing booking.

    ``id`` is optional; when set, a reschedule can recognise the booking's
    own window and ignore it.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    start_at: datetime
    end_at: datetime
    status: BookingStatus

    @field_validator("start_at", "end_at")
    @classmethod
    def ensure_timezone(cls, value: datetime) -> datetime:
        return as_aware(value)
