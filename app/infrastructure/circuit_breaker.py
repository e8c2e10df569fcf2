"""
Circuit Breaker configuration for calls to the payment gateway.

CLOSED lets requests through, OPEN fails them immediately after too many
consecutive failures, HALF_OPEN lets a trial request through once
``reset_timeout`` has elapsed.

Only exceptions raised inside ``paymongo_breaker.call`` count as failures,
so callers raise for transport errors and 5xx responses and hand 4xx
responses back untouched.
"""

import logging

from pybreaker import CircuitBreaker, CircuitBreakerError, CircuitBreakerListener

logger = logging.getLogger(__name__)


def log_circuit_state_change(breaker_name: str, old_state: str, new_state: str) -> None:
    logger.warning(
        "Circuit breaker state changed",
        extra={
            "breaker_name": breaker_name,
            "old_state": old_state,
            "new_state": new_state,
        },
    )


class StateChangeLogger(CircuitBreakerListener):
    """Listener for circuit breaker state changes."""

    def __init__(self, name: str):
        self.name = name

    def state_change(self, cb, old_state, new_state):
        old_name = old_state.name if old_state else "none"
        log_circuit_state_change(self.name, old_name, new_state.name)


paymongo_breaker = CircuitBreaker(
    fail_max=5,  # Open circuit after 5 consecutive failures
    reset_timeout=60,  # Wait 60 seconds before attempting recovery
    name="paymongo_circuit_breaker",
    listeners=[StateChangeLogger("paymongo")],
)


__all__ = [
    "paymongo_breaker",
    "CircuitBreakerError",
    "StateChangeLogger",
]
