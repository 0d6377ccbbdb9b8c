"""
Unit Tests for Circuit Breaker

Tests the CLOSED -> OPEN -> HALF_OPEN -> CLOSED lifecycle against a fake clock.
"""

import threading

import pytest

from sre_monitor.core.config.constants import CircuitState
from sre_monitor.core.exceptions import ConfigurationError
from sre_monitor.core.resilience.circuit_breaker import CircuitBreaker


@pytest.fixture
def breaker(clock):
    return CircuitBreaker(failure_threshold=5, recovery_timeout=60, clock=clock)


def _open(breaker):
    for _ in range(breaker.failure_threshold):
        breaker.record_failure()
    assert breaker.state == CircuitState.OPEN


@pytest.mark.unit
class TestClosedState:
    def test_initial_state(self, breaker):
        assert breaker.state == CircuitState.CLOSED
        assert breaker.failure_count == 0
        assert breaker.can_execute() is True

    def test_stays_closed_below_threshold(self, breaker):
        for _ in range(4):
            breaker.record_failure()

        assert breaker.state == CircuitState.CLOSED
        assert breaker.failure_count == 4
        assert breaker.can_execute() is True

    def test_opens_at_threshold(self, breaker, clock):
        _open(breaker)

        assert breaker.get_state() == {"state": "OPEN", "failure_count": 5}
        assert breaker.next_attempt == clock() + 60
        assert breaker.can_execute() is False

    def test_success_resets_failure_count(self, breaker):
        for _ in range(4):
            breaker.record_failure()
        breaker.record_success()

        assert breaker.failure_count == 0
        for _ in range(4):
            breaker.record_failure()
        assert breaker.state == CircuitState.CLOSED

    def test_threshold_of_one_opens_on_first_failure(self, clock):
        breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=10, clock=clock)
        breaker.record_failure()
        assert breaker.state == CircuitState.OPEN


@pytest.mark.unit
class TestOpenState:
    def test_refuses_until_recovery_timeout(self, breaker, clock):
        _open(breaker)

        clock.advance(59.9)
        assert breaker.can_execute() is False
        assert breaker.state == CircuitState.OPEN

    def test_moves_to_half_open_after_timeout(self, breaker, clock):
        _open(breaker)

        clock.advance(60)

        assert breaker.can_execute() is True
        assert breaker.state == CircuitState.HALF_OPEN

    def test_failure_while_open_rearms_timer(self, breaker, clock):
        _open(breaker)
        clock.advance(30)

        breaker.record_failure()

        assert breaker.state == CircuitState.OPEN
        assert breaker.next_attempt == clock() + 60
        clock.advance(59)
        assert breaker.can_execute() is False

    def test_zero_recovery_timeout_allows_immediate_trial(self, clock):
        breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=0, clock=clock)
        breaker.record_failure()

        assert breaker.can_execute() is True
        assert breaker.state == CircuitState.HALF_OPEN


@pytest.mark.unit
class TestHalfOpenState:
    @pytest.fixture
    def half_open(self, breaker, clock):
        _open(breaker)
        clock.advance(60)
        assert breaker.can_execute()
        return breaker

    def test_success_closes_circuit(self, half_open):
        half_open.record_success()

        assert half_open.state == CircuitState.CLOSED
        assert half_open.failure_count == 0

    def test_single_failure_reopens_immediately(self, half_open, clock):
        half_open.record_failure()

        assert half_open.state == CircuitState.OPEN
        assert half_open.next_attempt == clock() + 60
        assert half_open.can_execute() is False

    def test_admits_while_half_open(self, half_open):
        assert half_open.can_execute() is True
        assert half_open.can_execute() is True
        assert half_open.state == CircuitState.HALF_OPEN

    def test_full_recovery_cycle(self, half_open, clock):
        half_open.record_failure()
        clock.advance(60)

        assert half_open.can_execute() is True
        half_open.record_success()

        assert half_open.get_state() == {"state": "CLOSED", "failure_count": 0}


@pytest.mark.unit
class TestStateAndConfiguration:
    def test_get_state_is_a_pure_read(self, breaker):
        breaker.record_failure()

        assert breaker.get_state() == {"state": "CLOSED", "failure_count": 1}
        assert breaker.get_state() == {"state": "CLOSED", "failure_count": 1}

    def test_get_state_does_not_advance_open_circuit(self, breaker, clock):
        _open(breaker)
        clock.advance(120)

        assert breaker.get_state()["state"] == "OPEN"

    def test_concurrent_failures_are_all_counted(self, clock):
        breaker = CircuitBreaker(failure_threshold=5, recovery_timeout=60, clock=clock)

        def worker():
            for _ in range(200):
                breaker.record_failure()

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert breaker.failure_count == 2000
        assert breaker.state == CircuitState.OPEN
        assert breaker.next_attempt == clock() + 60

    def test_rejects_zero_threshold(self):
        with pytest.raises(ConfigurationError):
            CircuitBreaker(failure_threshold=0, recovery_timeout=60)

    def test_rejects_negative_recovery_timeout(self):
        with pytest.raises(ConfigurationError):
            CircuitBreaker(failure_threshold=5, recovery_timeout=-1)
