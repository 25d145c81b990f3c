"""
Mock payment gateway.

In production this would call a real payment provider over HTTP. The mock
returns deterministic checkout URLs so flows can be exercised offline.
Webhook signature verification lives with the HTTP layer, not here.
"""

import json
import logging
from typing import Optional, Protocol
from urllib.parse import urlencode

from booknpay.config import settings
from booknpay.errors import InvalidInputError
from booknpay.schemas.payment_schema import (
    PaymentEvent,
    PaymentEventType,
    PaymentIntent,
    TopupIntent,
)

logger = logging.getLogger(__name__)


class PaymentGateway(Protocol):
    async def create_topup_intent(self, provider_id: str, credits: int) -> TopupIntent:
        ...

    async def create_per_booking_intent(self, booking_id: str, amount_cents: int) -> PaymentIntent:
        ...

    def parse_event(self, raw_body: str) -> PaymentEvent:
        ...


class MockPaymentGateway:
    """Deterministic stand-in for a hosted checkout provider."""

    def __init__(self, base_url: Optional[str] = None) -> None:
        self.base_url = (base_url or settings.payments.mock_base_url).rstrip("/")
        self.name = settings.payments.gateway_name

    async def create_topup_intent(self, provider_id: str, credits: int) -> TopupIntent:
        query = urlencode({"provider": provider_id, "credits": credits})
        return TopupIntent(checkout_url=f"{self.base_url}/topup?{query}")

    async def create_per_booking_intent(self, booking_id: str, amount_cents: int) -> PaymentIntent:
        reference = f"{self.name}_{booking_id}"
        logger.debug("Created mock intent %s for %d cents", reference, amount_cents)
        return PaymentIntent(
            checkout_url=f"{self.base_url}/booking/{booking_id}?amount={amount_cents}",
            reference=reference,
        )

    def parse_event(self, raw_body: str) -> PaymentEvent:
        """Turn a webhook body into an event. Any status but succeeded is a failure."""
        try:
            payload = json.loads(raw_body)
        except json.JSONDecodeError:
            raise InvalidInputError("Webhook body is not valid JSON") from None
        if not isinstance(payload, dict) or not payload.get("refId"):
            raise InvalidInputError("Webhook body is missing refId")

        if payload.get("status") == "succeeded":
            event_type = PaymentEventType.SUCCEEDED
        else:
            event_type = PaymentEventType.FAILED
        return PaymentEvent(type=event_type, ref_id=str(payload["refId"]))
