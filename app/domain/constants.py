"""Constantes del dominio de reservaciones de hotel."""

PAYMENT_PROVIDER_PAYMONGO = "PAYMONGO"

DEFAULT_CURRENCY = "PHP"

RESERVATION_SOURCE_WEBSITE = "WEBSITE"
GUEST_SOURCE_WEBSITE = "WEBSITE"

# Tipos de evento de PayMongo que el sistema reconcilia
EVENT_CHECKOUT_SESSION_PAID = "checkout_session.payment.paid"
EVENT_CHECKOUT_SESSION_FAILED = "checkout_session.payment.failed"
EVENT_PAYMENT_PAID = "payment.paid"
EVENT_PAYMENT_INTENT_SUCCEEDED = "payment_intent.succeeded"
EVENT_PAYMENT_FAILED = "payment.failed"
EVENT_PAYMENT_INTENT_FAILED = "payment_intent.payment_failed"

# Códigos de falla persistidos en Payment.failure_code
FAILURE_CODE_PAYMENT_FAILED = "payment_failed"
FAILURE_CODE_PAYMENT_INTENT_FAILED = "payment_intent_failed"

UNKNOWN_FAILURE_REASON = "Unknown reason"
