import enum
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from backend.utils.config import CIRCUIT_FAILURE_THRESHOLD, CIRCUIT_TIMEOUT_SECONDS
from backend.utils.error_handlers import app_exception_response
from backend.utils.exceptions import ExternalServiceException
from backend.utils.logger import get_logger

logger = get_logger("circuit_breaker")


class CircuitState(enum.Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerState:
    def __init__(self):
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.next_attempt = 0.0

    def record_failure(self):
        self.failure_count += 1

    def reset(self):
        self.failure_count = 0
        self.state = CircuitState.CLOSED

    def trip(self, now: float, timeout_seconds: float):
        self.state = CircuitState.OPEN
        self.next_attempt = now + timeout_seconds


class CircuitBreaker:
    """Per-endpoint circuit breaker kept in process memory."""

    def __init__(self, failure_threshold=CIRCUIT_FAILURE_THRESHOLD, timeout_seconds=CIRCUIT_TIMEOUT_SECONDS, clock=time.monotonic):
        self.failure_threshold = failure_threshold
        self.timeout_seconds = timeout_seconds
        self.clock = clock
        self._circuits = {}

    def get(self, key: str) -> CircuitBreakerState:
        return self._circuits.setdefault(key, CircuitBreakerState())

    def allow_request(self, key: str) -> bool:
        circuit = self.get(key)
        if circuit.state is CircuitState.OPEN:
            if self.clock() < circuit.next_attempt:
                logger.warning(f"Circuit breaker is OPEN for endpoint {key}. Rejecting request.")
                return False
            circuit.state = CircuitState.HALF_OPEN
            logger.info(f"Circuit breaker transitioning to HALF-OPEN for endpoint {key}")
        return True

    def record_success(self, key: str):
        circuit = self.get(key)
        if circuit.state is CircuitState.HALF_OPEN:
            circuit.reset()
            logger.info(f"Circuit breaker reset to CLOSED for endpoint {key}")

    def record_failure(self, key: str):
        circuit = self.get(key)
        circuit.record_failure()
        if circuit.failure_count >= self.failure_threshold:
            circuit.trip(self.clock(), self.timeout_seconds)
            logger.warning(f"Circuit breaker OPENED for endpoint {key} after {circuit.failure_count} failures")


class CircuitBreakerMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, breaker: CircuitBreaker = None):
        super().__init__(app)
        self.breaker = breaker or CircuitBreaker()

    @staticmethod
    def _circuit_key(request):
        """Key on the matched route template, so /items/1 and /items/2 share one circuit."""
        for route in request.app.router.routes:
            match, _ = route.matches(request.scope)
            if match is Match.FULL:
                return f"{request.method}:{route.path}"
        return None

    async def dispatch(self, request, call_next):
        key = self._circuit_key(request)
        if key is None:
            # Unrouted paths end in a 404 and are not tracked
            return await call_next(request)

        if not self.breaker.allow_request(key):
            exc = ExternalServiceException(
                "API",
                "Service temporarily unavailable due to repeated failures. Please try again later.",
            )
            return app_exception_response(request, exc)

        try:
            response = await call_next(request)
        except Exception:
            self.breaker.record_failure(key)
            raise

        if response.status_code >= 500:
            self.breaker.record_failure(key)
        else:
            self.breaker.record_success(key)
        return response
