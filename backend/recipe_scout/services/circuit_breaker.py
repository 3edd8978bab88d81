# recipe_scout/services/circuit_breaker.py
# Per-origin circuit breaker: stop hammering a site that keeps failing.
# closed -> (N consecutive failures) -> open -> (cooldown) -> half-open, one trial -> closed | open
# All mutation happens on the event loop thread without awaits, so no lock is needed.

from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict

from recipe_scout.services.errors import CircuitOpenError

log = logging.getLogger(__name__)


@dataclass
class CircuitState:
    failures: int = 0
    last_failure: float = 0.0
    is_open: bool = False
    trial_in_flight: bool = False


class CircuitBreakerRegistry:
    def __init__(
        self,
        failure_threshold: int = 3,
        cooldown_s: float = 300.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.failure_threshold = failure_threshold
        self.cooldown_s = cooldown_s
        self._clock = clock
        self._circuits: Dict[str, CircuitState] = {}

    def _get(self, origin: str) -> CircuitState:
        state = self._circuits.get(origin)
        if state is None:
            state = self._circuits[origin] = CircuitState()
        return state

    def before_request(self, origin: str) -> bool:
        """
        Raise CircuitOpenError unless a request to origin may go out now.

        Returns True when the caller holds the half-open trial; it must pass
        that back to record_failure so only the trial releases the slot.
        """
        state = self._get(origin)
        if not state.is_open:
            return False
        if state.trial_in_flight:
            raise CircuitOpenError(origin)
        if self._clock() - state.last_failure < self.cooldown_s:
            raise CircuitOpenError(origin)
        state.trial_in_flight = True
        log.info("circuit half-open for %s, allowing one trial request", origin)
        return True

    def record_success(self, origin: str) -> None:
        state = self._get(origin)
        if state.is_open:
            log.info("circuit closed for %s", origin)
        state.failures = 0
        state.is_open = False
        state.trial_in_flight = False

    def record_failure(self, origin: str, trial: bool = False) -> None:
        state = self._get(origin)
        state.failures += 1
        state.last_failure = self._clock()
        # a request that went out before the circuit opened does not hold the trial
        if trial:
            state.trial_in_flight = False
        if state.failures >= self.failure_threshold:
            if not state.is_open:
                log.warning(
                    "circuit OPEN for %s after %d failures, retry after %ss",
                    origin, state.failures, self.cooldown_s,
                )
            state.is_open = True

    def is_open(self, origin: str) -> bool:
        state = self._circuits.get(origin)
        return bool(state and state.is_open)

    def snapshot(self) -> Dict[str, dict]:
        return {
            origin: {
                "failures": s.failures,
                "isOpen": s.is_open,
                "halfOpen": s.trial_in_flight,
                "lastFailure": s.last_failure,
            }
            for origin, s in self._circuits.items()
        }
