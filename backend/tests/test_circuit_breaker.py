import pytest

from recipe_scout.services.circuit_breaker import CircuitBreakerRegistry
from recipe_scout.services.errors import CircuitOpenError

ORIGIN = "www.allrecipes.com"


def test_opens_after_threshold_failures(clock):
    cb = CircuitBreakerRegistry(failure_threshold=3, cooldown_s=300, clock=clock)
    for _ in range(2):
        cb.before_request(ORIGIN)
        cb.record_failure(ORIGIN)
    assert not cb.is_open(ORIGIN)

    cb.before_request(ORIGIN)
    cb.record_failure(ORIGIN)
    assert cb.is_open(ORIGIN)
    with pytest.raises(CircuitOpenError):
        cb.before_request(ORIGIN)


def test_success_resets_failures(clock):
    cb = CircuitBreakerRegistry(clock=clock)
    cb.record_failure(ORIGIN)
    cb.record_failure(ORIGIN)
    cb.record_success(ORIGIN)
    cb.record_failure(ORIGIN)
    assert not cb.is_open(ORIGIN)
    assert cb.snapshot()[ORIGIN]["failures"] == 1


def test_half_open_allows_exactly_one_trial(clock):
    cb = CircuitBreakerRegistry(failure_threshold=3, cooldown_s=300, clock=clock)
    for _ in range(3):
        cb.record_failure(ORIGIN)

    clock.advance(299)
    with pytest.raises(CircuitOpenError):
        cb.before_request(ORIGIN)

    clock.advance(2)
    cb.before_request(ORIGIN)          # the trial
    assert cb.snapshot()[ORIGIN]["halfOpen"] is True
    with pytest.raises(CircuitOpenError):
        cb.before_request(ORIGIN)      # a second caller while the trial is in flight


def test_trial_success_closes(clock):
    cb = CircuitBreakerRegistry(clock=clock)
    for _ in range(3):
        cb.record_failure(ORIGIN)
    clock.advance(301)
    cb.before_request(ORIGIN)
    cb.record_success(ORIGIN)
    assert not cb.is_open(ORIGIN)
    cb.before_request(ORIGIN)
    cb.before_request(ORIGIN)


def test_trial_failure_reopens_for_a_new_cooldown(clock):
    cb = CircuitBreakerRegistry(clock=clock)
    for _ in range(3):
        cb.record_failure(ORIGIN)
    clock.advance(301)
    trial = cb.before_request(ORIGIN)
    assert trial is True
    cb.record_failure(ORIGIN, trial)
    assert cb.is_open(ORIGIN)
    with pytest.raises(CircuitOpenError):
        cb.before_request(ORIGIN)
    clock.advance(301)
    cb.before_request(ORIGIN)


def test_origins_are_independent(clock):
    cb = CircuitBreakerRegistry(clock=clock)
    for _ in range(3):
        cb.record_failure(ORIGIN)
    cb.before_request("www.bbcgoodfood.com")
    assert set(cb.snapshot()) == {ORIGIN, "www.bbcgoodfood.com"}


def test_closed_circuit_hands_out_no_trial(clock):
    cb = CircuitBreakerRegistry(clock=clock)
    assert cb.before_request(ORIGIN) is False


def test_straggler_failure_does_not_release_the_trial(clock):
    cb = CircuitBreakerRegistry(failure_threshold=3, cooldown_s=300, clock=clock)
    for _ in range(3):
        cb.record_failure(ORIGIN)
    clock.advance(301)
    trial = cb.before_request(ORIGIN)

    # a request sent before the circuit opened fails while the trial is out
    cb.record_failure(ORIGIN)
    clock.advance(301)
    with pytest.raises(CircuitOpenError):
        cb.before_request(ORIGIN)

    cb.record_failure(ORIGIN, trial)
    clock.advance(301)
    assert cb.before_request(ORIGIN) is True
