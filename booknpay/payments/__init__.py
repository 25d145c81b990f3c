from booknpay.payments.gateway import MockPaymentGateway, PaymentGateway
from booknpay.payments.webhook import resolve_payment_event

__all__ = ["MockPaymentGateway", "PaymentGateway", "resolve_payment_event"]
