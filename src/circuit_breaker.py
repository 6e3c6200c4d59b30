"""
Circuit breaker for calls to the rule oracle.
Stops hammering the LLM provider while it is failing, and lets callers fail
fast with a retryable error instead of waiting for every timeout.
"""

import logging
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitBreakerOpenError(RuntimeError):
    """Raised when circuit breaker blocks execution."""


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"  # Normal operation
    OPEN = "open"  # Blocking requests
    HALF_OPEN = "half_open"  # Testing recovery


class CircuitBreaker:
    """
    Async circuit breaker.

    States:
    - CLOSED: calls pass through
    - OPEN: calls fail immediately with CircuitBreakerOpenError
    - HALF_OPEN: one trial call decides between CLOSED and OPEN

    Only exceptions matching ``tracked_exceptions`` count as failures; any
    other exception propagates without touching the counters.
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        timeout: int = 60,
        name: str = "CircuitBreaker",
        tracked_exceptions: tuple[type[BaseException], ...] = (Exception,),
    ):
        """
        Args:
            failure_threshold: Consecutive failures before the circuit opens
            timeout: Seconds to stay open before a trial call is allowed
            name: Name used in logs and monitoring
            tracked_exceptions: Exception types that count as failures
        """
        self.failure_threshold = failure_threshold
        self.timeout = timeout
        self.name = name
        self.tracked_exceptions = tracked_exceptions

        self.failure_count = 0
        self.state = CircuitState.CLOSED
        self.last_failure_time: float | None = None

        logger.info(
            f"CircuitBreaker '{name}' initialized: "
            f"threshold={failure_threshold}, timeout={timeout}s"
        )

    async def call(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """
        Await ``func(*args, **kwargs)`` under circuit breaker protection.

        Raises:
            CircuitBreakerOpenError: the circuit is open
            Exception: whatever ``func`` raised
        """
        if self.state == CircuitState.OPEN:
            if self._should_attempt_reset():
                logger.info(f"CircuitBreaker '{self.name}': OPEN -> HALF_OPEN")
                self.state = CircuitState.HALF_OPEN
            else:
                raise CircuitBreakerOpenError(
                    f"CircuitBreaker '{self.name}' is OPEN. Service unavailable."
                )

        try:
            result = await func(*args, **kwargs)
        except self.tracked_exceptions as e:
            self._record_failure()
            logger.error(
                f"CircuitBreaker '{self.name}' failure "
                f"({self.failure_count}/{self.failure_threshold}): {e}"
            )
            raise

        if self.state == CircuitState.HALF_OPEN:
            logger.info(f"CircuitBreaker '{self.name}': HALF_OPEN -> CLOSED")
        self._reset()
        return result

    def _record_failure(self) -> None:
        self.failure_count += 1
        self.last_failure_time = time.time()

        if self.state == CircuitState.HALF_OPEN or self.failure_count >= self.failure_threshold:
            if self.state != CircuitState.OPEN:
                logger.warning(f"CircuitBreaker '{self.name}': {self.state.name} -> OPEN")
            self.state = CircuitState.OPEN

    def _should_attempt_reset(self) -> bool:
        if self.last_failure_time is None:
            return True
        return time.time() - self.last_failure_time >= self.timeout

    def _reset(self) -> None:
        self.failure_count = 0
        self.state = CircuitState.CLOSED
        self.last_failure_time = None

    def get_state(self) -> dict:
        """Get current circuit breaker state for monitoring."""
        return {
            "name": self.name,
            "state": self.state.value,
            "failure_count": self.failure_count,
            "failure_threshold": self.failure_threshold,
            "last_failure_time": self.last_failure_time,
        }
