"""
Circuit breaker for the payment gateway.

After ``fail_max`` consecutive transport failures the breaker opens and
invoice creation fails immediately for ``reset_timeout`` seconds, after
which a single trial call is let through (half-open).
"""

import logging

from pybreaker import CircuitBreaker, CircuitBreakerError, CircuitBreakerListener

logger = logging.getLogger(__name__)


class StateChangeLogger(CircuitBreakerListener):
    def __init__(self, name: str):
        self.name = name

    def state_change(self, cb, old_state, new_state):
        logger.warning(
            "Circuit breaker state changed",
            extra={
                "breaker_name": self.name,
                "old_state": old_state.name if old_state else None,
                "new_state": new_state.name,
            },
        )


xendit_breaker = CircuitBreaker(
    fail_max=5,
    reset_timeout=60,
    name="xendit_circuit_breaker",
    listeners=[StateChangeLogger("xendit")],
)


__all__ = [
    "xendit_breaker",
    "CircuitBreakerError",
]
