"""
Unit Tests for PeriodicTask
"""

import asyncio

import pytest

from sre_monitor.core.tasks import PeriodicTask


@pytest.mark.unit
class TestPeriodicTask:
    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            PeriodicTask("noop", lambda: None, interval=0)

    @pytest.mark.asyncio
    async def test_runs_repeatedly_until_stopped(self):
        calls = []
        task = PeriodicTask("counter", lambda: calls.append(1), interval=0.01)

        task.start()
        assert task.running
        await asyncio.sleep(0.1)
        await task.stop()

        assert not task.running
        assert len(calls) >= 2
        assert task.runs == len(calls)

    @pytest.mark.asyncio
    async def test_failing_run_does_not_stop_schedule(self):
        attempts = []

        def flaky():
            attempts.append(1)
            raise RuntimeError("sweep failed")

        task = PeriodicTask("flaky", flaky, interval=0.01)
        task.start()
        await asyncio.sleep(0.1)

        assert task.running
        await task.stop()
        assert len(attempts) >= 2

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self):
        task = PeriodicTask("noop", lambda: None, interval=10)

        first = task.start()
        second = task.start()

        assert first is second
        await task.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start_is_noop(self):
        task = PeriodicTask("noop", lambda: None, interval=10)
        await task.stop()
        assert not task.running
